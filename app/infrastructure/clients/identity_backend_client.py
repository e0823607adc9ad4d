from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from app.application.ports.identity_backend_port import IdentityBackendPort
from app.domain.entities.oauth import (
    BackendIdentityResult,
    BackendUser,
    OAuthProvider,
    ProviderIdentity,
    ProviderTokenSet,
)
from app.domain.exceptions import BackendRejectedError, OAuthConfigurationError
from app.infrastructure.clients.oauth_http import json_object, optional_str


logger = logging.getLogger(__name__)


SIGNUP_PATHS: dict[str, str] = {
    "google": "/auth/google-signup",
    "linkedin": "/auth/linkedIn-signup",
}

GENERIC_BACKEND_ERROR = "Unknown error"


@dataclass(frozen=True)
class IdentityBackendClientSettings:
    base_url: str
    timeout_seconds: float


def build_signup_payload(
    *,
    provider: OAuthProvider,
    tokens: ProviderTokenSet,
    identity: ProviderIdentity,
) -> dict:
    if provider == "google":
        return {"idToken": tokens.id_token}
    return {
        "id_token": tokens.id_token,
        "sub": identity.subject,
        "email": identity.email,
        "name": identity.name,
        "given_name": identity.given_name,
        "family_name": identity.family_name,
        "picture": identity.picture,
    }


def parse_signup_response(payload: dict) -> BackendIdentityResult:
    user_raw = payload.get("user")
    if not isinstance(user_raw, dict):
        raise BackendRejectedError("Backend response missing user.", details="Malformed backend response")

    user_id = user_raw.get("_id") or user_raw.get("userId")
    if not user_id:
        raise BackendRejectedError("Backend user missing _id.", details="Malformed backend response")

    external_id = user_raw.get("userId")
    token = payload.get("token")
    return BackendIdentityResult(
        user=BackendUser(
            id=str(user_id),
            user_id=str(external_id) if external_id else None,
            email=optional_str(user_raw.get("email")),
            name=optional_str(user_raw.get("name")),
        ),
        is_new_user=payload.get("isNewUser") is True,
        token=token if isinstance(token, str) and token else None,
    )


class IdentityBackendClient(IdentityBackendPort):
    def __init__(
        self,
        settings: IdentityBackendClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def signup_url(self, provider: OAuthProvider) -> str:
        return f"{self._settings.base_url.rstrip('/')}{SIGNUP_PATHS[provider]}"

    def signup(
        self,
        *,
        provider: OAuthProvider,
        tokens: ProviderTokenSet,
        identity: ProviderIdentity,
    ) -> BackendIdentityResult:
        if not self._settings.base_url:
            raise OAuthConfigurationError(
                "Identity backend is not configured.",
                details="BACKEND_BASE_URL is required",
            )
        url = self.signup_url(provider)
        body = build_signup_payload(provider=provider, tokens=tokens, identity=identity)
        try:
            with httpx.Client(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.post(url, json=body)
        except httpx.HTTPError as exc:
            raise BackendRejectedError(
                "Identity backend unreachable.",
                details=type(exc).__name__,
            ) from exc

        payload = json_object(response)
        if response.status_code >= 400:
            error = (payload or {}).get("error")
            details = error if isinstance(error, str) and error else GENERIC_BACKEND_ERROR
            raise BackendRejectedError(
                f"Identity backend rejected signup with HTTP {response.status_code}.",
                details=details,
            )
        if payload is None:
            raise BackendRejectedError(
                "Identity backend response is not a JSON object.",
                details="Malformed backend response",
            )

        result = parse_signup_response(payload)
        logger.info(
            "identity_backend_client: signup_ok provider=%s is_new_user=%s has_token=%s",
            provider,
            result.is_new_user,
            result.token is not None,
        )
        return result
