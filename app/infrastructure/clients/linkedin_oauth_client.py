from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
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
    EmailNotFoundError,
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


LINKEDIN_TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
LINKEDIN_PROFILE_URL = "https://api.linkedin.com/v2/userinfo"
LINKEDIN_EMAIL_URL = "https://api.linkedin.com/v2/emailAddress"
LINKEDIN_EMAIL_PARAMS = {"q": "members", "projection": "(elements*(handle~))"}


@dataclass(frozen=True)
class LinkedInOauthClientSettings:
    client_id: str
    client_secret: str
    redirect_uri: str
    timeout_seconds: float
    token_url: str = LINKEDIN_TOKEN_URL
    profile_url: str = LINKEDIN_PROFILE_URL
    email_url: str = LINKEDIN_EMAIL_URL


def extract_email(payload: dict | None) -> str | None:
    """Le elements[0]["handle~"].emailAddress; qualquer formato diferente devolve None."""
    if not isinstance(payload, dict):
        return None
    elements = payload.get("elements")
    if not isinstance(elements, list) or not elements:
        return None
    first = elements[0]
    if not isinstance(first, dict):
        return None
    handle = first.get("handle~")
    if not isinstance(handle, dict):
        return None
    email = handle.get("emailAddress")
    if not isinstance(email, str) or not email.strip():
        return None
    return email.strip()


class LinkedInOauthClient(OAuthProviderPort):
    name: OAuthProvider = "linkedin"

    def __init__(
        self,
        settings: LinkedInOauthClientSettings,
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
                "LinkedIn OAuth client is not configured.",
                details="LINKEDIN_CLIENT_ID and LINKEDIN_CLIENT_SECRET are required",
            )

    def exchange_code(self, *, request: AuthorizationRequest) -> ProviderTokenSet:
        self._require_credentials()
        form = {
            "grant_type": "authorization_code",
            "code": request.code,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "redirect_uri": self._settings.redirect_uri,
        }
        if request.code_verifier:
            form["code_verifier"] = request.code_verifier

        try:
            with self._client() as client:
                response = client.post(self._settings.token_url, data=form, headers=FORM_HEADERS)
        except httpx.HTTPError as exc:
            raise TokenExchangeFailedError(
                "LinkedIn token endpoint unreachable.",
                details=type(exc).__name__,
            ) from exc

        if response.status_code >= 400:
            raise TokenExchangeFailedError(
                "LinkedIn rejected the authorization code.",
                details=provider_error_detail(response),
            )
        payload = json_object(response)
        if payload is None:
            raise TokenExchangeFailedError("LinkedIn token response is not a JSON object.")

        access_token = payload.get("access_token")
        if not access_token:
            raise TokenExchangeFailedError("LinkedIn token response missing access_token.")

        id_token = payload.get("id_token")
        expires_in = optional_int(payload.get("expires_in"))
        logger.info(
            "linkedin_oauth_client: code_exchanged has_id_token=%s expires_in=%s",
            bool(id_token),
            expires_in,
        )
        return ProviderTokenSet(
            access_token=str(access_token),
            id_token=str(id_token) if id_token else None,
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=expires_in,
        )

    def resolve_identity(self, *, tokens: ProviderTokenSet) -> ProviderIdentity:
        headers = bearer_headers(tokens.access_token)
        with self._client() as client, ThreadPoolExecutor(max_workers=2) as executor:
            profile_future = executor.submit(
                self._get_json,
                client,
                self._settings.profile_url,
                headers,
                None,
                "profile",
            )
            email_future = executor.submit(
                self._get_json,
                client,
                self._settings.email_url,
                headers,
                LINKEDIN_EMAIL_PARAMS,
                "email",
            )
            profile = profile_future.result()
            email_payload = email_future.result()

        subject = profile.get("sub")
        if not subject:
            raise IdentityResolutionFailedError("LinkedIn profile missing sub.")

        email = extract_email(email_payload)
        if email is None:
            raise EmailNotFoundError("Email not found in LinkedIn response.")

        given_name = optional_str(profile.get("given_name"))
        family_name = optional_str(profile.get("family_name"))
        name = optional_str(profile.get("name"))
        if not name:
            name = " ".join(part for part in (given_name, family_name) if part) or None

        return ProviderIdentity(
            subject=str(subject),
            email=email,
            name=name,
            picture=optional_str(profile.get("picture")),
            given_name=given_name,
            family_name=family_name,
        )

    def _get_json(
        self,
        client: httpx.Client,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None,
        resource: str,
    ) -> dict:
        try:
            response = client.get(url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            raise IdentityResolutionFailedError(
                f"LinkedIn {resource} endpoint unreachable.",
                details=type(exc).__name__,
            ) from exc

        if response.status_code >= 400:
            raise IdentityResolutionFailedError(
                f"LinkedIn {resource} request failed.",
                details=provider_error_detail(response),
            )
        payload = json_object(response)
        if payload is None:
            raise IdentityResolutionFailedError(f"LinkedIn {resource} response is not a JSON object.")
        return payload
