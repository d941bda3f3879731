"""Authentication and token routers.

Endpoints (paths come from Settings; defaults shown):
    POST /api/auth/register  -> 200 TokenResponse | 400
    POST /api/auth/login     -> 200 TokenResponse | 401
    POST /api/auth/logout    -> 200 empty | 401
    POST /api/token/refresh  -> 200 TokenResponse | 401

Every endpoint delegates to AuthEngine and maps failed envelopes through
ErrorResponseBuilder.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from src.application.commands.auth_commands import AuthenticateUser, RegisterUser
from src.application.dtos.auth_dtos import AuthenticationResult, TokenRefreshResult
from src.application.services.auth_engine import AuthEngine
from src.core.config import Settings
from src.core.container import get_auth_engine
from src.domain.value_objects import UsernamePasswordCredentials
from src.presentation.routers.errors.error_response_builder import (
    ErrorResponseBuilder,
)
from src.schemas.auth_schemas import (
    ErrorResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    ValidationErrorResponse,
)


def _token_response(result: AuthenticationResult | TokenRefreshResult) -> TokenResponse:
    return TokenResponse(
        access_token=result.access_token,  # type: ignore[arg-type]
        refresh_token=result.refresh_token,  # type: ignore[arg-type]
        token_type=result.token_type or "Bearer",
    )


async def register(
    data: RegisterRequest,
    engine: AuthEngine = Depends(get_auth_engine),
) -> TokenResponse | JSONResponse:
    """Register a user and return access and refresh tokens."""
    command = RegisterUser(
        email=data.email,
        username=data.username,
        password=data.password,
        roles=frozenset(role.value for role in data.roles) if data.roles else None,
    )

    result = await engine.register_user(command)

    match result:
        case AuthenticationResult(success=True):
            return _token_response(result)
        case _:
            return ErrorResponseBuilder.from_error_code(result.error_code, result.message)


async def login(
    request: Request,
    data: LoginRequest,
    engine: AuthEngine = Depends(get_auth_engine),
) -> TokenResponse | JSONResponse:
    """Authenticate by username (or email) and password."""
    command = AuthenticateUser(
        credentials=UsernamePasswordCredentials(
            username=data.username_or_email, password=data.password
        ),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    result = await engine.authenticate(command)

    match result:
        case AuthenticationResult(success=True):
            return _token_response(result)
        case _:
            return ErrorResponseBuilder.from_error_code(result.error_code, result.message)


async def logout(
    data: RefreshTokenRequest,
    engine: AuthEngine = Depends(get_auth_engine),
) -> Response:
    """Revoke every refresh token of the token's user (empty 200)."""
    result = await engine.logout(data.refresh_token)

    if result.success:
        return Response(status_code=status.HTTP_200_OK)
    return ErrorResponseBuilder.from_error_code(result.error_code, result.message)


async def refresh(
    data: RefreshTokenRequest,
    engine: AuthEngine = Depends(get_auth_engine),
) -> TokenResponse | JSONResponse:
    """Exchange a live refresh token for a new access token."""
    result = await engine.refresh_token(data.refresh_token)

    match result:
        case TokenRefreshResult(success=True):
            return _token_response(result)
        case _:
            return ErrorResponseBuilder.from_error_code(result.error_code, result.message)


_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"description": "Validation or uniqueness failure", "model": ValidationErrorResponse},
    401: {"description": "Authentication failure", "model": ErrorResponse},
    503: {"description": "Storage temporarily unavailable", "model": ErrorResponse},
}


def create_auth_router(settings: Settings) -> APIRouter:
    """Build the registration/login/logout router under the auth base path."""
    router = APIRouter(prefix=settings.auth_base_path, tags=["Authentication"])
    router.add_api_route(
        settings.register_path,
        register,
        methods=["POST"],
        response_model=TokenResponse,
        response_model_by_alias=True,
        responses=_ERROR_RESPONSES,
        summary="Register",
    )
    router.add_api_route(
        settings.login_path,
        login,
        methods=["POST"],
        response_model=TokenResponse,
        response_model_by_alias=True,
        responses=_ERROR_RESPONSES,
        summary="Login",
    )
    router.add_api_route(
        settings.logout_path,
        logout,
        methods=["POST"],
        response_class=Response,
        responses=_ERROR_RESPONSES,
        summary="Logout",
    )
    return router


def create_token_router(settings: Settings) -> APIRouter:
    """Build the token refresh router under the token base path."""
    router = APIRouter(prefix=settings.token_base_path, tags=["Tokens"])
    router.add_api_route(
        settings.refresh_path,
        refresh,
        methods=["POST"],
        response_model=TokenResponse,
        response_model_by_alias=True,
        responses=_ERROR_RESPONSES,
        summary="Refresh access token",
    )
    return router
