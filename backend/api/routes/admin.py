"""
Admin endpoints.

Every route here requires the admin role.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from shared.models import APIResponse, AuthenticatedUser
from modules.posts.interfaces import IPostService
from modules.posts.models import DeletePostsRequest, DeletePostsResponse, PostListResponse
from modules.users.interfaces import IUserService
from modules.users.models import UserListResponse

from ..dependencies import get_post_service, get_user_service
from ..middleware.auth import require_admin

router = APIRouter()


class DeleteUsersRequest(BaseModel):
    """Admin request to delete several users."""

    users: list[str] = Field(..., min_length=1)


class DeleteUsersResponse(APIResponse):
    deleted: int


@router.get("/get-users", response_model=UserListResponse)
async def get_users(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserService = Depends(get_user_service),
) -> UserListResponse:
    return UserListResponse(users=await service.list_users_with_posts())


@router.get("/get-all-posts", response_model=PostListResponse)
async def get_all_posts(
    admin: AuthenticatedUser = Depends(require_admin),
    service: IPostService = Depends(get_post_service),
) -> PostListResponse:
    return PostListResponse(posts=await service.list_posts(admin))


@router.delete("/delete-users", response_model=DeleteUsersResponse)
async def delete_users(
    request: DeleteUsersRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IUserService = Depends(get_user_service),
) -> DeleteUsersResponse:
    """Delete users and, before them, every post they own."""
    deleted = await service.delete_users(request.users)
    return DeleteUsersResponse(message="Users deleted successfully", deleted=deleted)


@router.delete("/delete-posts", response_model=DeletePostsResponse)
async def delete_posts(
    request: DeletePostsRequest,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IPostService = Depends(get_post_service),
) -> DeletePostsResponse:
    deleted = await service.delete_posts(request.posts)
    return DeletePostsResponse(message="Posts deleted successfully", deleted=deleted)
