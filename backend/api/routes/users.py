"""
User-related endpoints.

Provides endpoints for the caller's own profile and account.
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile

from shared.config import get_settings
from shared.models import APIResponse, AuthenticatedUser
from modules.storage.models import FileUpload
from modules.users.interfaces import IUserService
from modules.users.models import UpdateProfileRequest, UserResponse

from ..dependencies import get_user_service
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/user", response_model=UserResponse)
async def get_user(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> UserResponse:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return UserResponse(user=await service.get_profile(user.id))


@router.put("/user", response_model=UserResponse)
async def update_user(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> UserResponse:
    profile = await service.update_profile(user.id, request)
    return UserResponse(message="User updated successfully", user=profile)


@router.post("/avatar", response_model=UserResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> UserResponse:
    upload = FileUpload(
        filename=file.filename or "avatar",
        content=await file.read(),
        content_type=file.content_type,
    )
    profile = await service.upload_avatar(user.id, upload)
    return UserResponse(message="Avatar updated successfully", user=profile)


@router.delete("/user", response_model=APIResponse)
async def delete_user(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IUserService = Depends(get_user_service),
) -> APIResponse:
    """Delete the caller's account and posts, and end the session."""
    await service.delete_account(user.id)
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return APIResponse(message="User deleted successfully")
