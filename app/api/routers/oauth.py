from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from app.api.deps import get_google_oauth_flow_use_case, get_linkedin_oauth_flow_use_case
from app.api.schemas.oauth import OAuthErrorResponse
from app.application.dto.oauth import CompleteOAuthFlowInput
from app.application.use_cases.complete_oauth_flow import CompleteOAuthFlowUseCase
from app.domain.entities.oauth import OAuthProvider
from app.domain.exceptions import OAuthFlowError


router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": OAuthErrorResponse},
    500: {"model": OAuthErrorResponse},
}


def _error_response(exc: OAuthFlowError) -> JSONResponse:
    body = OAuthErrorResponse(error=exc.public_message, kind=exc.kind, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def _complete(
    *,
    provider: OAuthProvider,
    code: str | None,
    code_verifier: str | None,
    use_case: CompleteOAuthFlowUseCase,
):
    try:
        output = use_case.execute(
            CompleteOAuthFlowInput(
                provider=provider,
                code=code,
                code_verifier=code_verifier,
            )
        )
    except OAuthFlowError as exc:
        return _error_response(exc)

    return RedirectResponse(url=output.redirect_url, status_code=302)


@router.get("/", response_class=PlainTextResponse)
def welcome() -> str:
    return "Welcome to Venturloop Backend!"


@router.get("/callback", response_class=RedirectResponse, responses=ERROR_RESPONSES)
def google_callback(
    code: str | None = None,
    code_verifier: str | None = None,
    use_case: CompleteOAuthFlowUseCase = Depends(get_google_oauth_flow_use_case),
):
    return _complete(
        provider="google",
        code=code,
        code_verifier=code_verifier,
        use_case=use_case,
    )


@router.get("/callback_linkedIn", response_class=RedirectResponse, responses=ERROR_RESPONSES)
def linkedin_callback(
    code: str | None = None,
    use_case: CompleteOAuthFlowUseCase = Depends(get_linkedin_oauth_flow_use_case),
):
    return _complete(
        provider="linkedin",
        code=code,
        code_verifier=None,
        use_case=use_case,
    )
