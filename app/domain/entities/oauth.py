from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


OAuthProvider = Literal["google", "linkedin"]


@dataclass(frozen=True)
class AuthorizationRequest:
    provider: OAuthProvider
    code: str
    code_verifier: str | None = None


@dataclass(frozen=True)
class ProviderTokenSet:
    access_token: str
    id_token: str | None
    token_type: str
    expires_in: int | None

    def __repr__(self) -> str:
        # keep raw tokens out of logs and tracebacks
        return (
            f"ProviderTokenSet(token_type={self.token_type!r}, "
            f"expires_in={self.expires_in!r}, has_id_token={self.id_token is not None})"
        )


@dataclass(frozen=True)
class ProviderIdentity:
    subject: str
    email: str | None
    name: str | None
    picture: str | None
    given_name: str | None = None
    family_name: str | None = None


@dataclass(frozen=True)
class BackendUser:
    id: str
    user_id: str | None
    email: str | None
    name: str | None


@dataclass(frozen=True)
class BackendIdentityResult:
    user: BackendUser
    is_new_user: bool
    token: str | None
