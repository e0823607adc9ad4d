from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.oauth import OAuthProvider


@dataclass(frozen=True)
class CompleteOAuthFlowInput:
    provider: OAuthProvider
    code: str | None
    code_verifier: str | None = None


@dataclass(frozen=True)
class CompleteOAuthFlowOutput:
    redirect_url: str
    user_id: str
    is_new_user: bool
    token_source: str | None
