"""
SocialNet Backend — User Route Handlers
=========================================

What:  /users endpoints: registration, login, own profile, token check,
       public lookup by username and a user's liked posts.

Route order matters: the fixed paths (/profile, /verify, /username/...) are
declared before /{user_id}/liked-posts.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.database import get_db_session
from socialnet.dependencies import get_bearer_token, get_current_user, get_pagination
from socialnet.schemas.common import ApiResponse, ErrorResponse, PaginatedResponse, PaginationParams
from socialnet.schemas.post import LikedPostView
from socialnet.schemas.user import (
    LoginResult,
    TokenPayload,
    TokenUser,
    UserLogin,
    UserProfilePublic,
    UserPublic,
    UserRegister,
    UserUpdate,
)
from socialnet.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

AUTH_ERRORS = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
NOT_FOUND = {404: {"description": "Account does not exist", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Request format error", "model": ErrorResponse}}


@router.post(
    "/register",
    response_model=ApiResponse[UserPublic],
    status_code=status.HTTP_201_CREATED,
    responses={**BAD_REQUEST},
    summary="Create an account",
)
async def register(
    body: UserRegister,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    user = await user_service.register(db, body)
    return ApiResponse[UserPublic](message="Registration successful", data=user)


@router.post(
    "/login",
    response_model=ApiResponse[LoginResult],
    responses={**BAD_REQUEST, **AUTH_ERRORS, **NOT_FOUND},
    summary="Exchange email and password for an access token",
)
async def login(
    body: UserLogin,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[LoginResult]:
    result = await user_service.login(db, body)
    return ApiResponse[LoginResult](message="Login successful", data=result)


@router.get(
    "/profile",
    response_model=ApiResponse[UserPublic],
    responses={**AUTH_ERRORS, **NOT_FOUND},
    summary="The caller's own account",
)
async def get_profile(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    user = await user_service.get_profile(db, current_user.id)
    return ApiResponse[UserPublic](message="Profile retrieved successfully", data=user)


@router.put(
    "/profile",
    response_model=ApiResponse[UserPublic],
    responses={**BAD_REQUEST, **AUTH_ERRORS, **NOT_FOUND},
    summary="Update age and/or city",
)
async def update_profile(
    body: UserUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserPublic]:
    user = await user_service.update_profile(db, current_user.id, body)
    return ApiResponse[UserPublic](message="Profile updated successfully", data=user)


@router.get(
    "/verify",
    response_model=ApiResponse[TokenPayload],
    responses={**AUTH_ERRORS, **NOT_FOUND},
    summary="Check that a token is valid and its account still exists",
)
async def verify_token(
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[TokenPayload]:
    payload = await user_service.verify_token(db, token)
    return ApiResponse[TokenPayload](message="Token is valid", data=payload)


@router.get(
    "/username/{username}",
    response_model=ApiResponse[UserProfilePublic],
    responses={**NOT_FOUND},
    summary="Public profile lookup by username",
)
async def get_user_by_username(
    username: str = Path(..., min_length=1),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserProfilePublic]:
    user = await user_service.get_user_by_username(db, username)
    return ApiResponse[UserProfilePublic](message="User found", data=user)


@router.get(
    "/{user_id}/liked-posts",
    response_model=PaginatedResponse[List[LikedPostView]],
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Posts liked by a user, newest like first",
)
async def get_user_liked_posts(
    user_id: int = Path(..., ge=1),
    page: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db_session),
) -> PaginatedResponse[List[LikedPostView]]:
    likes, pagination = await user_service.get_user_liked_posts(db, user_id, page.limit, page.offset)
    return PaginatedResponse[List[LikedPostView]](
        message="Liked posts retrieved successfully",
        data=likes,
        pagination=pagination,
    )
