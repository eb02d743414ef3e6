"""
Post API endpoints.

Creation takes multipart form data so attachments can travel with the
post; everything else is JSON.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import get_billing_service, get_post_service
from api.middleware.auth import get_current_user
from shared.exceptions import ValidationError
from shared.models import APIResponse, AuthenticatedUser
from modules.billing.interfaces import IBillingService
from modules.billing.models import (
    CheckoutResponse,
    EntitlementResponse,
    PurchaseRequest,
    VerifyPaymentRequest,
)
from modules.storage.models import FileUpload

from .interfaces import IPostService
from .models import (
    AddCommentRequest,
    CreatePostRequest,
    CreatePostResponse,
    DeleteCommentRequest,
    LikeResponse,
    PostIdRequest,
    PostListResponse,
    PostResponse,
)

router = APIRouter()


async def read_uploads(files: Optional[list[UploadFile]]) -> list[FileUpload]:
    """Read multipart files into memory."""
    uploads = []
    for f in files or []:
        uploads.append(FileUpload(
            filename=f.filename or "file",
            content=await f.read(),
            content_type=f.content_type,
        ))
    return uploads


@router.post("/create", response_model=CreatePostResponse, status_code=201)
async def create_post(
    description: str = Form(...),
    title: Optional[str] = Form(None),
    is_paid: bool = Form(False),
    price: Decimal = Form(Decimal(0)),
    files: Optional[list[UploadFile]] = File(None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> CreatePostResponse:
    try:
        request = CreatePostRequest(
            description=description,
            title=title or None,
            is_paid=is_paid,
            price=price,
        )
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}", code="VALIDATION_ERROR")

    post = await service.create_post(user.id, request, await read_uploads(files))
    return CreatePostResponse(message="Post created successfully", post_id=post.id)


@router.delete("/delete", response_model=APIResponse)
async def delete_post(
    request: PostIdRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> APIResponse:
    await service.delete_post(request.post_id, user)
    return APIResponse(message="Post deleted successfully")


@router.post("/add-comment", response_model=APIResponse)
async def add_comment(
    request: AddCommentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> APIResponse:
    await service.add_comment(request.post_id, user.id, request.text, request.date)
    return APIResponse(message="Comment added successfully")


@router.delete("/delete-comment", response_model=APIResponse)
async def delete_comment(
    request: DeleteCommentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> APIResponse:
    await service.delete_comment(request.post_id, request.comment_id, user)
    return APIResponse(message="Comment deleted successfully")


@router.patch("/like-or-dislike", response_model=LikeResponse)
async def like_or_dislike(
    request: PostIdRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> LikeResponse:
    post = await service.toggle_like(request.post_id, user.id)
    liked = user.id in post.likes
    return LikeResponse(
        message="Post liked" if liked else "Post unliked",
        liked=liked,
        likes=post.likes,
    )


@router.get("/get-all-posts", response_model=PostListResponse)
async def get_all_posts(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> PostListResponse:
    return PostListResponse(posts=await service.list_posts(user))


@router.get("/get-my-posts", response_model=PostListResponse)
async def get_my_posts(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> PostListResponse:
    return PostListResponse(posts=await service.list_user_posts(user.id, user))


@router.get("/get-user-posts", response_model=PostListResponse)
async def get_user_posts(
    user_id: str = Query(..., min_length=1),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> PostListResponse:
    return PostListResponse(posts=await service.list_user_posts(user_id, user))


@router.get("/get-post", response_model=PostResponse)
async def get_post(
    post_id: str = Query(..., min_length=1),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> PostResponse:
    return PostResponse(post=await service.get_post(post_id, user))


@router.get("/search", response_model=PostListResponse)
async def search_posts(
    query: str = Query(""),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IPostService = Depends(get_post_service),
) -> PostListResponse:
    return PostListResponse(posts=await service.search(query, user))


@router.post("/purchase", response_model=CheckoutResponse)
async def purchase_post(
    request: PurchaseRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> CheckoutResponse:
    session = await billing.initiate_purchase(request.post_id, user.id)
    return CheckoutResponse(session_id=session.session_id, url=session.url)


@router.post("/verify-payment", response_model=EntitlementResponse)
async def verify_payment(
    request: VerifyPaymentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    billing: IBillingService = Depends(get_billing_service),
) -> EntitlementResponse:
    paid = await billing.confirm_purchase(request.session_id, request.post_id, user.id)
    return EntitlementResponse(message="Payment verified", paid_for_posts=paid)
