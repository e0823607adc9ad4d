from __future__ import annotations

from typing import Protocol

from app.domain.entities.oauth import (
    AuthorizationRequest,
    OAuthProvider,
    ProviderIdentity,
    ProviderTokenSet,
)


class OAuthProviderPort(Protocol):
    name: OAuthProvider

    def exchange_code(self, *, request: AuthorizationRequest) -> ProviderTokenSet:
        ...

    def resolve_identity(self, *, tokens: ProviderTokenSet) -> ProviderIdentity:
        ...
