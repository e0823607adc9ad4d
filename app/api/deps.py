from __future__ import annotations

from functools import lru_cache

from app.application.use_cases.complete_oauth_flow import CompleteOAuthFlowUseCase
from app.infrastructure.clients.google_oauth_client import (
    GoogleOauthClient,
    GoogleOauthClientSettings,
)
from app.infrastructure.clients.identity_backend_client import (
    IdentityBackendClient,
    IdentityBackendClientSettings,
)
from app.infrastructure.clients.linkedin_oauth_client import (
    LinkedInOauthClient,
    LinkedInOauthClientSettings,
)
from app.infrastructure.security.token_service import JwtTokenService
from app.shared.config import get_settings


# credentials are checked by each adapter at call time


@lru_cache(maxsize=1)
def _get_google_oauth_client() -> GoogleOauthClient:
    settings = get_settings()
    return GoogleOauthClient(
        GoogleOauthClientSettings(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
            timeout_seconds=settings.oauth_http_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_linkedin_oauth_client() -> LinkedInOauthClient:
    settings = get_settings()
    return LinkedInOauthClient(
        LinkedInOauthClientSettings(
            client_id=settings.linkedin_client_id,
            client_secret=settings.linkedin_client_secret,
            redirect_uri=settings.linkedin_redirect_uri,
            timeout_seconds=settings.oauth_http_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_identity_backend_client() -> IdentityBackendClient:
    settings = get_settings()
    return IdentityBackendClient(
        IdentityBackendClientSettings(
            base_url=settings.backend_base_url,
            timeout_seconds=settings.oauth_http_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService | None:
    settings = get_settings()
    if not settings.jwt_secret:
        return None
    return JwtTokenService(jwt_secret=settings.jwt_secret, ttl_days=settings.jwt_ttl_days)


def get_google_oauth_flow_use_case() -> CompleteOAuthFlowUseCase:
    return CompleteOAuthFlowUseCase(
        providers={"google": _get_google_oauth_client()},
        backend_port=_get_identity_backend_client(),
        token_port=_get_token_service(),
        deep_link_scheme=get_settings().deep_link_scheme,
    )


def get_linkedin_oauth_flow_use_case() -> CompleteOAuthFlowUseCase:
    return CompleteOAuthFlowUseCase(
        providers={"linkedin": _get_linkedin_oauth_client()},
        backend_port=_get_identity_backend_client(),
        token_port=_get_token_service(),
        deep_link_scheme=get_settings().deep_link_scheme,
    )
