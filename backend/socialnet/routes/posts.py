"""
SocialNet Backend — Post Route Handlers
=========================================

What:  /posts endpoints: posts, likes and comments.

Auth:
    required → create, update, delete, like toggle, comment writes
    optional → GET /posts/{post_id} (token accepted, never demanded)
    none     → timelines and the comment/like listings

/posts/user/{user_id} is declared before /posts/{post_id} so "user" is never
parsed as a post id.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.database import get_db_session
from socialnet.dependencies import get_current_user, get_optional_user, get_pagination
from socialnet.schemas.common import (
    ApiResponse,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationParams,
)
from socialnet.schemas.post import (
    CommentCreate,
    CommentListItem,
    CommentRecord,
    CommentUpdate,
    LikeToggleResult,
    LikeView,
    PostCreate,
    PostDetail,
    PostRecord,
    PostUpdate,
    PostView,
)
from socialnet.schemas.user import TokenUser
from socialnet.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

ERRORS = {
    400: {"description": "Request format error", "model": ErrorResponse},
    401: {"description": "Unauthorized access", "model": ErrorResponse},
    404: {"description": "Post or comment does not exist", "model": ErrorResponse},
}


# ── Posts ─────────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=ApiResponse[PostRecord],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Publish a post",
)
async def create_post(
    body: PostCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[PostRecord]:
    post = await post_service.create_post(db, body, current_user.id)
    return ApiResponse[PostRecord](message="Post created successfully", data=post)


@router.get(
    "",
    response_model=PaginatedResponse[List[PostView]],
    responses=ERRORS,
    summary="Global timeline, newest first",
)
async def list_posts(
    page: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db_session),
) -> PaginatedResponse[List[PostView]]:
    posts, pagination = await post_service.get_all_posts(db, page.limit, page.offset)
    return PaginatedResponse[List[PostView]](
        message="Posts retrieved successfully", data=posts, pagination=pagination
    )


@router.get(
    "/user/{user_id}",
    response_model=PaginatedResponse[List[PostView]],
    responses=ERRORS,
    summary="A user's posts, newest first",
)
async def list_user_posts(
    user_id: int = Path(..., ge=1),
    page: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db_session),
) -> PaginatedResponse[List[PostView]]:
    posts, pagination = await post_service.get_user_posts(db, user_id, page.limit, page.offset)
    return PaginatedResponse[List[PostView]](
        message="User posts retrieved successfully", data=posts, pagination=pagination
    )


@router.get(
    "/{post_id}",
    response_model=ApiResponse[PostDetail],
    responses=ERRORS,
    summary="One post with author, comments and like count",
)
async def get_post(
    post_id: int = Path(..., ge=1),
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[PostDetail]:
    post = await post_service.get_post_by_id(db, post_id)
    logger.debug("Post %s viewed by %s", post_id, current_user.id if current_user else "anonymous")
    return ApiResponse[PostDetail](message="Post retrieved successfully", data=post)


@router.put(
    "/{post_id}",
    response_model=ApiResponse[PostRecord],
    responses=ERRORS,
    summary="Edit your own post",
)
async def update_post(
    body: PostUpdate,
    post_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[PostRecord]:
    post = await post_service.update_post(db, post_id, body, current_user.id)
    return ApiResponse[PostRecord](message="Post updated successfully", data=post)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    responses=ERRORS,
    summary="Delete your own post with its comments and likes",
)
async def delete_post(
    post_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await post_service.delete_post(db, post_id, current_user.id)
    return MessageResponse(message="Post deleted successfully")


# ── Likes ─────────────────────────────────────────────────────────────────


@router.post(
    "/{post_id}/like",
    response_model=ApiResponse[LikeToggleResult],
    responses=ERRORS,
    summary="Like a post, or undo your like",
)
async def toggle_like(
    post_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[LikeToggleResult]:
    result = await post_service.toggle_like(db, post_id, current_user.id)
    message = "Post liked" if result.liked else "Post unliked"
    return ApiResponse[LikeToggleResult](message=message, data=result)


@router.get(
    "/{post_id}/likes",
    response_model=PaginatedResponse[List[LikeView]],
    responses=ERRORS,
    summary="Who liked a post, newest first",
)
async def list_likes(
    post_id: int = Path(..., ge=1),
    page: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db_session),
) -> PaginatedResponse[List[LikeView]]:
    likes, pagination = await post_service.get_post_likes(db, post_id, page.limit, page.offset)
    return PaginatedResponse[List[LikeView]](
        message="Likes retrieved successfully", data=likes, pagination=pagination
    )


# ── Comments ──────────────────────────────────────────────────────────────


@router.post(
    "/{post_id}/comments",
    response_model=ApiResponse[CommentRecord],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Comment on a post",
)
async def add_comment(
    body: CommentCreate,
    post_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CommentRecord]:
    comment = await post_service.add_comment(db, post_id, body.content, current_user.id)
    return ApiResponse[CommentRecord](message="Comment created successfully", data=comment)


@router.get(
    "/{post_id}/comments",
    response_model=PaginatedResponse[List[CommentListItem]],
    responses=ERRORS,
    summary="Comments on a post, oldest first",
)
async def list_comments(
    post_id: int = Path(..., ge=1),
    page: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db_session),
) -> PaginatedResponse[List[CommentListItem]]:
    comments, pagination = await post_service.get_post_comments(db, post_id, page.limit, page.offset)
    return PaginatedResponse[List[CommentListItem]](
        message="Comments retrieved successfully", data=comments, pagination=pagination
    )


@router.put(
    "/{post_id}/comments/{comment_id}",
    response_model=ApiResponse[CommentRecord],
    responses=ERRORS,
    summary="Edit your own comment",
)
async def update_comment(
    body: CommentUpdate,
    post_id: int = Path(..., ge=1),
    comment_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CommentRecord]:
    comment = await post_service.update_comment(
        db, post_id, comment_id, body.content, current_user.id
    )
    return ApiResponse[CommentRecord](message="Comment updated successfully", data=comment)


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_model=MessageResponse,
    responses=ERRORS,
    summary="Delete your own comment",
)
async def delete_comment(
    post_id: int = Path(..., ge=1),
    comment_id: int = Path(..., ge=1),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await post_service.delete_comment(db, post_id, comment_id, current_user.id)
    return MessageResponse(message="Comment deleted successfully")
