from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class OAuthFlowError(DomainError):
    """Falha em alguma etapa do fluxo OAuth."""

    kind = "OAuthFlowError"
    status_code = 500
    public_message = "Authentication failed"

    def __init__(self, message: str, *, details: str | None = None):
        super().__init__(message)
        self.details = details


class MissingCodeError(OAuthFlowError):
    """Requisicao chegou sem authorization code."""

    kind = "MissingCode"
    status_code = 400
    public_message = "Authorization code is missing"


class TokenExchangeFailedError(OAuthFlowError):
    """Provider rejeitou a troca do code ou devolveu corpo invalido."""

    kind = "TokenExchangeFailed"


class IdentityResolutionFailedError(OAuthFlowError):
    """Nao foi possivel obter a identidade do usuario no provider."""

    kind = "IdentityResolutionFailed"


class EmailNotFoundError(IdentityResolutionFailedError):
    """Resposta de email do LinkedIn sem elements[0].handle~.emailAddress."""

    kind = "EmailNotFound"


class BackendRejectedError(OAuthFlowError):
    """Backend de identidade recusou o signup."""

    kind = "BackendRejected"


class OAuthConfigurationError(OAuthFlowError):
    """Credenciais ou URLs obrigatorias nao configuradas."""

    kind = "ConfigurationError"
