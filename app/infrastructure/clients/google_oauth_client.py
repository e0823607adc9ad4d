from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from app.application.ports.oauth_provider_port import OAuthProviderPort
from app.domain.entities.oauth import (
    AuthorizationRequest,
    OAuthProvider,
    ProviderIdentity,
    ProviderTokenSet,
)
from app.domain.exceptions import (
    IdentityResolutionFailedError,
    OAuthConfigurationError,
    TokenExchangeFailedError,
)
from app.infrastructure.clients.oauth_http import (
    FORM_HEADERS,
    bearer_headers,
    json_object,
    optional_int,
    optional_str,
    provider_error_detail,
)


logger = logging.getLogger(__name__)


GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


@dataclass(frozen=True)
class GoogleOauthClientSettings:
    client_id: str
    client_secret: str
    redirect_uri: str
    timeout_seconds: float
    token_url: str = GOOGLE_TOKEN_URL
    userinfo_url: str = GOOGLE_USERINFO_URL


class GoogleOauthClient(OAuthProviderPort):
    name: OAuthProvider = "google"

    def __init__(
        self,
        settings: GoogleOauthClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport)

    def _require_credentials(self) -> None:
        if not self._settings.client_id or not self._settings.client_secret:
            raise OAuthConfigurationError(
                "Google OAuth client is not configured.",
                details="GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are required",
            )

    def exchange_code(self, *, request: AuthorizationRequest) -> ProviderTokenSet:
        self._require_credentials()
        form = {
            "code": request.code,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "redirect_uri": self._settings.redirect_uri,
            "grant_type": "authorization_code",
        }
        if request.code_verifier:
            form["code_verifier"] = request.code_verifier

        try:
            with self._client() as client:
                response = client.post(self._settings.token_url, data=form, headers=FORM_HEADERS)
        except httpx.HTTPError as exc:
            raise TokenExchangeFailedError(
                "Google token endpoint unreachable.",
                details=type(exc).__name__,
            ) from exc

        if response.status_code >= 400:
            raise TokenExchangeFailedError(
                "Google rejected the authorization code.",
                details=provider_error_detail(response),
            )
        payload = json_object(response)
        if payload is None:
            raise TokenExchangeFailedError("Google token response is not a JSON object.")

        access_token = payload.get("access_token")
        id_token = payload.get("id_token")
        if not access_token or not id_token:
            raise TokenExchangeFailedError(
                "Google token response missing access_token or id_token.",
            )

        expires_in = payload.get("expires_in")
        logger.info(
            "google_oauth_client: code_exchanged pkce=%s expires_in=%s",
            bool(request.code_verifier),
            expires_in,
        )
        return ProviderTokenSet(
            access_token=str(access_token),
            id_token=str(id_token),
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=optional_int(expires_in),
        )

    def resolve_identity(self, *, tokens: ProviderTokenSet) -> ProviderIdentity:
        try:
            with self._client() as client:
                response = client.get(
                    self._settings.userinfo_url,
                    headers=bearer_headers(tokens.access_token),
                )
        except httpx.HTTPError as exc:
            raise IdentityResolutionFailedError(
                "Google userinfo endpoint unreachable.",
                details=type(exc).__name__,
            ) from exc

        if response.status_code >= 400:
            raise IdentityResolutionFailedError(
                "Google userinfo request failed.",
                details=provider_error_detail(response),
            )
        payload = json_object(response)
        if payload is None or not payload.get("sub"):
            raise IdentityResolutionFailedError("Google userinfo missing sub.")

        return ProviderIdentity(
            subject=str(payload["sub"]),
            email=optional_str(payload.get("email")),
            name=optional_str(payload.get("name")),
            picture=optional_str(payload.get("picture")),
            given_name=optional_str(payload.get("given_name")),
            family_name=optional_str(payload.get("family_name")),
        )
