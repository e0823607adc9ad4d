from __future__ import annotations

from typing import Protocol

from app.domain.entities.oauth import (
    BackendIdentityResult,
    OAuthProvider,
    ProviderIdentity,
    ProviderTokenSet,
)


class IdentityBackendPort(Protocol):
    def signup(
        self,
        *,
        provider: OAuthProvider,
        tokens: ProviderTokenSet,
        identity: ProviderIdentity,
    ) -> BackendIdentityResult:
        ...
