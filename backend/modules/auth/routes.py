"""
Account endpoints.

Register and login set the session cookie; logout clears it.
"""

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_auth_service
from shared.config import get_settings
from shared.models import APIResponse

from .interfaces import IAuthService
from .models import AuthResponse, AuthSession, LoginRequest, RegisterRequest

router = APIRouter()


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
        max_age=settings.access_token_expire_minutes * 60,
    )


def _respond(response: Response, session: AuthSession, message: str) -> AuthResponse:
    set_session_cookie(response, session.token)
    return AuthResponse(message=message, user=session.user, access_token=session.token)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    session = await service.register(request.name, request.email, request.password)
    return _respond(response, session, "User registered successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    session = await service.login(request.email, request.password)
    return _respond(response, session, "Logged in successfully")


@router.post("/logout", response_model=APIResponse)
async def logout(response: Response) -> APIResponse:
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return APIResponse(message="Logged out successfully")
