"""
SocialNet Backend — Post Service
==================================

What:  Posts, comments and likes: creation, timelines, ownership-checked
       updates/deletes and the like toggle.
Who:   Called by the /posts route handlers.

Ownership rule:
    Only the author of a post (or comment) may update or delete it. A
    non-author gets AuthenticationError("Unauthorized access") → 401.

Existence checks run before ownership checks, so a missing post is always
404 regardless of who asks.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    SocialNetError,
    ValidationError,
)
from socialnet.models.comment import COMMENT_CONTENT_MAX_LENGTH, Comment
from socialnet.models.post import POST_CONTENT_MAX_LENGTH, Post
from socialnet.repositories import (
    CommentRepository,
    LikeRepository,
    PostRepository,
    UserRepository,
)
from socialnet.schemas.common import Pagination
from socialnet.schemas.post import (
    CommentListItem,
    CommentRecord,
    LikeToggleResult,
    LikeView,
    PostCreate,
    PostDetail,
    PostRecord,
    PostUpdate,
    PostView,
)
from socialnet.services.pagination import COMMENT_PAGE_CAP, POST_PAGE_CAP, clamp_pagination

logger = logging.getLogger(__name__)


def _clean_content(content: Optional[str], max_length: int) -> str:
    """Trims `content`; blank or oversized text is a request format error."""
    cleaned = (content or "").strip()
    if not cleaned:
        raise ValidationError("content must not be empty", field="content")
    if len(cleaned) > max_length:
        raise ValidationError(
            f"content must be at most {max_length} characters", field="content"
        )
    return cleaned


class PostService:
    """
    Business logic for posts, comments and likes.

    Every public method wraps unexpected failures in DatabaseError; the app's
    own exceptions pass through unchanged.
    """

    # ── Internal lookups ──────────────────────────────────────────────────

    async def _require_post(self, db: AsyncSession, post_id: int) -> Post:
        post = await PostRepository(db).get(post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    async def _require_comment(self, db: AsyncSession, post_id: int, comment_id: int) -> Comment:
        comment = await CommentRepository(db).find_by_id(comment_id)
        # A comment addressed through the wrong post does not exist at that URL
        if comment is None or comment.post_id != post_id:
            raise NotFoundError(resource="comment", resource_id=comment_id)
        return comment

    @staticmethod
    def _wrap(e: Exception, operation: str, **context) -> DatabaseError:
        logger.error("Database error in %s: %s", operation, str(e), exc_info=True)
        context["error_type"] = type(e).__name__
        return DatabaseError(context=context)

    # ── Posts ─────────────────────────────────────────────────────────────

    async def create_post(self, db: AsyncSession, data: PostCreate, user_id: int) -> PostRecord:
        """
        Publishes a post for `user_id`.

        Raises:
            NotFoundError: the author account no longer exists
            ValidationError: content is blank once trimmed
        """
        try:
            content = _clean_content(data.content, POST_CONTENT_MAX_LENGTH)
            if await UserRepository(db).find_by_id(user_id) is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            post = await PostRepository(db).create({"user_id": user_id, "content": content})
            logger.info("Post %s created by user %s", post.id, user_id)
            return PostRecord.model_validate(post)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "create_post", user_id=user_id)

    async def get_all_posts(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[PostView], Pagination]:
        """Global timeline, newest first."""
        page = clamp_pagination(limit, offset, cap=POST_PAGE_CAP, default=15)
        try:
            rows = await PostRepository(db).find_all(page.limit, page.offset)
            return [PostView.from_post(post, count) for post, count in rows], page
        except Exception as e:
            raise self._wrap(e, "get_all_posts")

    async def get_user_posts(
        self,
        db: AsyncSession,
        target_user_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[PostView], Pagination]:
        page = clamp_pagination(limit, offset, cap=POST_PAGE_CAP, default=15)
        try:
            if await UserRepository(db).find_by_id(target_user_id) is None:
                raise NotFoundError(resource="user", resource_id=target_user_id)
            rows = await PostRepository(db).find_by_user_id(target_user_id, page.limit, page.offset)
            return [PostView.from_post(post, count) for post, count in rows], page
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "get_user_posts", user_id=target_user_id)

    async def get_post_by_id(self, db: AsyncSession, post_id: int) -> PostDetail:
        try:
            found = await PostRepository(db).find_by_id(post_id)
            if found is None:
                raise NotFoundError(resource="post", resource_id=post_id)
            post, likes_count = found
            return PostDetail.from_post(post, likes_count)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "get_post_by_id", post_id=post_id)

    async def update_post(
        self, db: AsyncSession, post_id: int, data: PostUpdate, user_id: int
    ) -> PostRecord:
        """Replaces the content of the caller's own post; other fields are never touched."""
        try:
            post = await self._require_post(db, post_id)
            if post.user_id != user_id:
                logger.warning("User %s tried to update post %s of user %s", user_id, post_id, post.user_id)
                raise AuthenticationError()

            if data.content is not None:
                content = _clean_content(data.content, POST_CONTENT_MAX_LENGTH)
                post = await PostRepository(db).update(post, {"content": content})
                logger.info("Post %s updated", post_id)
            return PostRecord.model_validate(post)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "update_post", post_id=post_id)

    async def delete_post(self, db: AsyncSession, post_id: int, user_id: int) -> None:
        try:
            post = await self._require_post(db, post_id)
            if post.user_id != user_id:
                logger.warning("User %s tried to delete post %s of user %s", user_id, post_id, post.user_id)
                raise AuthenticationError()
            await PostRepository(db).delete(post)
            logger.info("Post %s deleted with its comments and likes", post_id)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "delete_post", post_id=post_id)

    # ── Likes ─────────────────────────────────────────────────────────────

    async def toggle_like(self, db: AsyncSession, post_id: int, user_id: int) -> LikeToggleResult:
        """Likes the post, or removes the like if `user_id` already liked it."""
        try:
            await self._require_post(db, post_id)
            outcome = await LikeRepository(db).toggle(post_id, user_id)
            logger.info("User %s %s post %s", user_id, outcome["action"], post_id)
            return LikeToggleResult(**outcome)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "toggle_like", post_id=post_id, user_id=user_id)

    async def get_post_likes(
        self,
        db: AsyncSession,
        post_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[LikeView], Pagination]:
        page = clamp_pagination(limit, offset, cap=COMMENT_PAGE_CAP, default=20)
        try:
            await self._require_post(db, post_id)
            likes = await LikeRepository(db).find_by_post_id(post_id, page.limit, page.offset)
            return [LikeView.model_validate(like) for like in likes], page
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "get_post_likes", post_id=post_id)

    # ── Comments ──────────────────────────────────────────────────────────

    async def add_comment(
        self, db: AsyncSession, post_id: int, content: str, user_id: int
    ) -> CommentRecord:
        try:
            cleaned = _clean_content(content, COMMENT_CONTENT_MAX_LENGTH)
            await self._require_post(db, post_id)
            comment = await CommentRepository(db).create(
                {"post_id": post_id, "user_id": user_id, "content": cleaned}
            )
            logger.info("Comment %s added to post %s by user %s", comment.id, post_id, user_id)
            return CommentRecord.model_validate(comment)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "add_comment", post_id=post_id)

    async def get_post_comments(
        self,
        db: AsyncSession,
        post_id: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[CommentListItem], Pagination]:
        """Comments under a post, oldest first, each with its author's public details."""
        page = clamp_pagination(limit, offset, cap=COMMENT_PAGE_CAP, default=20)
        try:
            await self._require_post(db, post_id)
            comments = await CommentRepository(db).find_by_post_id(post_id, page.limit, page.offset)
            return [CommentListItem.model_validate(c) for c in comments], page
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "get_post_comments", post_id=post_id)

    async def update_comment(
        self, db: AsyncSession, post_id: int, comment_id: int, content: str, user_id: int
    ) -> CommentRecord:
        try:
            cleaned = _clean_content(content, COMMENT_CONTENT_MAX_LENGTH)
            comment = await self._require_comment(db, post_id, comment_id)
            if comment.user_id != user_id:
                raise AuthenticationError()
            comment = await CommentRepository(db).update(comment, {"content": cleaned})
            logger.info("Comment %s updated", comment_id)
            return CommentRecord.model_validate(comment)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "update_comment", comment_id=comment_id)

    async def delete_comment(
        self, db: AsyncSession, post_id: int, comment_id: int, user_id: int
    ) -> None:
        try:
            comment = await self._require_comment(db, post_id, comment_id)
            if comment.user_id != user_id:
                raise AuthenticationError()
            await CommentRepository(db).delete(comment)
            logger.info("Comment %s deleted from post %s", comment_id, post_id)
        except SocialNetError:
            raise
        except Exception as e:
            raise self._wrap(e, "delete_comment", comment_id=comment_id)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
