"""
SocialNet Backend — User Service
==================================

What:  Account registration, login, profile reads/updates, token
       verification and the liked-posts listing.
Who:   Called by the /users route handlers.

Error Handling Strategy:
    Business failures raise the app's own exceptions (ConflictError,
    NotFoundError, AuthenticationError) and propagate untouched. Anything
    else coming out of SQLAlchemy is logged and wrapped in DatabaseError so
    driver details never reach the client.

Password hashing runs in a worker thread: bcrypt at cost 12 takes a few
hundred milliseconds and would otherwise block the event loop.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    SocialNetError,
)
from socialnet.repositories import LikeRepository, UserRepository
from socialnet.schemas.common import Pagination
from socialnet.schemas.post import LikedPostView
from socialnet.schemas.user import (
    LoginResult,
    TokenPayload,
    UserLogin,
    UserProfilePublic,
    UserPublic,
    UserRegister,
    UserUpdate,
)
from socialnet.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from socialnet.services.pagination import POST_PAGE_CAP, clamp_pagination

logger = logging.getLogger(__name__)

EDITABLE_PROFILE_FIELDS = {"age", "city"}


class UserService:
    """
    Business logic for accounts.

    Stateless: every method receives the request's AsyncSession and builds
    its repositories from it.
    """

    async def register(self, db: AsyncSession, data: UserRegister) -> UserPublic:
        """
        Creates an account.

        Raises:
            ConflictError: username ("Account already exists") or email
                           ("Email already exists") is taken
            DatabaseError: unexpected persistence failure
        """
        users = UserRepository(db)
        try:
            if await users.find_by_username(data.username) is not None:
                raise ConflictError("Account already exists", field="username")
            if await users.find_by_email(data.email) is not None:
                raise ConflictError("Email already exists", field="email")

            password_hash = await asyncio.to_thread(hash_password, data.password)
            user = await users.create(
                {
                    "username": data.username,
                    "email": data.email,
                    "password_hash": password_hash,
                    "age": data.age,
                    "city": data.city,
                }
            )
            logger.info("Registered user %s (%s)", user.id, user.username)
            return UserPublic.model_validate(user)

        except SocialNetError:
            raise
        except IntegrityError as e:
            # Lost a race against a concurrent registration of the same account
            logger.warning("Unique constraint hit while registering %s", data.username)
            if "email" in str(e.orig).lower():
                raise ConflictError("Email already exists", field="email")
            raise ConflictError("Account already exists", field="username")
        except Exception as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def login(self, db: AsyncSession, data: UserLogin) -> LoginResult:
        """
        Checks credentials and issues an access token.

        Raises:
            NotFoundError: no account with this email (404)
            AuthenticationError: wrong password (401)
        """
        try:
            user = await UserRepository(db).find_by_email(data.email)
            if user is None:
                raise NotFoundError(resource="user")

            valid = await asyncio.to_thread(verify_password, data.password, user.password_hash)
            if not valid:
                logger.info("Failed login for user %s", user.id)
                raise AuthenticationError("Incorrect account or password")

            token = create_access_token(user)
            logger.info("User %s logged in", user.id)
            return LoginResult(user=UserPublic.model_validate(user), token=token)

        except SocialNetError:
            raise
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def get_profile(self, db: AsyncSession, user_id: int) -> UserPublic:
        try:
            user = await UserRepository(db).find_by_id(user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)
            return UserPublic.model_validate(user)
        except SocialNetError:
            raise
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

    async def update_profile(self, db: AsyncSession, user_id: int, data: UserUpdate) -> UserPublic:
        """Applies only the age/city fields present in the request body."""
        users = UserRepository(db)
        try:
            user = await users.find_by_id(user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            changes = data.model_dump(exclude_unset=True, include=EDITABLE_PROFILE_FIELDS)
            if changes:
                user = await users.update(user, changes)
                logger.info("User %s updated profile fields %s", user_id, sorted(changes))
            return UserPublic.model_validate(user)

        except SocialNetError:
            raise
        except Exception as e:
            logger.error("Database error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": user_id})

    async def get_user_by_username(self, db: AsyncSession, username: str) -> UserProfilePublic:
        try:
            user = await UserRepository(db).find_by_username(username)
            if user is None:
                raise NotFoundError(resource="user", resource_id=username)
            return UserProfilePublic.model_validate(user)
        except SocialNetError:
            raise
        except Exception as e:
            logger.error("Database error looking up username %r: %s", username, str(e))
            raise DatabaseError(context={"username": username})

    async def verify_token(self, db: AsyncSession, token: Optional[str]) -> TokenPayload:
        """
        Returns the payload of a valid token whose user still exists.

        Raises:
            AuthenticationError: token missing, expired or tampered with
            NotFoundError: the account behind the token is gone
        """
        payload = decode_access_token(token) if token else None
        if payload is None:
            raise AuthenticationError()

        try:
            user = await UserRepository(db).find_by_id(payload["id"])
        except Exception as e:
            logger.error("Database error verifying token: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            raise NotFoundError(resource="user", resource_id=payload["id"])
        return TokenPayload.model_validate(payload)

    async def get_user_liked_posts(
        self,
        db: AsyncSession,
        user_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[LikedPostView], Pagination]:
        """Likes of `user_id`, newest first, each with the liked post."""
        page = clamp_pagination(limit, offset, cap=POST_PAGE_CAP, default=15)
        try:
            if await UserRepository(db).find_by_id(user_id) is None:
                raise NotFoundError(resource="user", resource_id=user_id)
            likes = await LikeRepository(db).find_by_user_id(user_id, page.limit, page.offset)
            return [LikedPostView.model_validate(like) for like in likes], page
        except SocialNetError:
            raise
        except Exception as e:
            logger.error("Database error listing likes of user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
