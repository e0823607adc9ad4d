from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Mapping

from app.application.dto.oauth import CompleteOAuthFlowInput, CompleteOAuthFlowOutput
from app.application.ports.identity_backend_port import IdentityBackendPort
from app.application.ports.oauth_provider_port import OAuthProviderPort
from app.application.ports.token_port import TokenPort
from app.domain.entities.oauth import (
    AuthorizationRequest,
    BackendIdentityResult,
    ProviderIdentity,
)
from app.domain.exceptions import (
    BackendRejectedError,
    IdentityResolutionFailedError,
    MissingCodeError,
    OAuthFlowError,
    TokenExchangeFailedError,
)
from app.domain.services.deep_link import DeepLinkRedirect, build_auth_redirect


logger = logging.getLogger(__name__)


STEP_ERRORS: dict[str, type[OAuthFlowError]] = {
    "exchange_code": TokenExchangeFailedError,
    "resolve_identity": IdentityResolutionFailedError,
    "backend_signup": BackendRejectedError,
    "issue_credential": OAuthFlowError,
    "build_redirect": OAuthFlowError,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompleteOAuthFlowUseCase:
    """Troca o authorization code, repassa a identidade ao backend e monta o deep link.

    Nenhuma etapa e repetida: a primeira falha interrompe o fluxo e nenhum
    redirect e produzido. Qualquer excecao depois da validacao do code sai
    como OAuthFlowError da etapa em que ocorreu.
    """

    def __init__(
        self,
        *,
        providers: Mapping[str, OAuthProviderPort],
        backend_port: IdentityBackendPort,
        token_port: TokenPort | None,
        deep_link_scheme: str,
    ):
        self._providers = dict(providers)
        self._backend_port = backend_port
        self._token_port = token_port
        self._deep_link_scheme = deep_link_scheme

    def execute(self, command: CompleteOAuthFlowInput) -> CompleteOAuthFlowOutput:
        code = (command.code or "").strip()
        if not code:
            raise MissingCodeError("Authorization code is missing.")

        provider = self._providers.get(command.provider)
        if provider is None:
            raise ValueError(f"Unsupported OAuth provider: {command.provider}")

        request = AuthorizationRequest(
            provider=command.provider,
            code=code,
            code_verifier=command.code_verifier or None,
        )

        step = "exchange_code"
        try:
            tokens = provider.exchange_code(request=request)
            step = "resolve_identity"
            identity = provider.resolve_identity(tokens=tokens)
            step = "backend_signup"
            result = self._backend_port.signup(
                provider=request.provider,
                tokens=tokens,
                identity=identity,
            )
            step = "issue_credential"
            token, token_source = self._resolve_app_token(result=result, identity=identity)
            step = "build_redirect"
            redirect = build_auth_redirect(
                scheme=self._deep_link_scheme,
                is_new_user=result.is_new_user,
                user_id=result.user.id,
                token=token,
            )
        except OAuthFlowError as exc:
            self._log_failure(request=request, step=step, exc=exc)
            raise
        except Exception as exc:
            error = STEP_ERRORS[step](
                f"Unexpected failure during {step}.",
                details=type(exc).__name__,
            )
            self._log_failure(request=request, step=step, exc=error)
            raise error from exc

        return self._build_output(request=request, result=result, redirect=redirect, token_source=token_source)

    def _build_output(
        self,
        *,
        request: AuthorizationRequest,
        result: BackendIdentityResult,
        redirect: DeepLinkRedirect,
        token_source: str | None,
    ) -> CompleteOAuthFlowOutput:
        logger.info(
            "oauth_flow: completed provider=%s is_new_user=%s token_source=%s path=%s",
            request.provider,
            result.is_new_user,
            token_source,
            redirect.path,
        )
        return CompleteOAuthFlowOutput(
            redirect_url=redirect.url,
            user_id=result.user.id,
            is_new_user=result.is_new_user,
            token_source=token_source,
        )

    def _log_failure(self, *, request: AuthorizationRequest, step: str, exc: OAuthFlowError) -> None:
        logger.warning(
            "oauth_flow: step_failed provider=%s step=%s kind=%s reason=%s",
            request.provider,
            step,
            exc.kind,
            exc,
        )

    def _resolve_app_token(
        self,
        *,
        result: BackendIdentityResult,
        identity: ProviderIdentity,
    ) -> tuple[str | None, str | None]:
        # backend-issued credential wins over a locally minted one
        if result.token:
            return result.token, "backend"
        if self._token_port is None:
            return None, None
        token, _expires_at = self._token_port.create_app_token(
            user_id=result.user.user_id or identity.subject,
            email=result.user.email or identity.email,
            name=result.user.name or identity.name,
            now=utcnow(),
        )
        return token, "local"
