"""
SocialNet Backend — Post Repository
=====================================

What:  Reads and writes `posts`, returning timeline rows as (Post, likes_count).
How:   Author and comments (with their authors) are eager-loaded with
       selectinload; an AsyncSession cannot lazy-load relationships later.
       The likes count is a correlated scalar subquery, so listing a page
       costs three queries regardless of page size:

           SELECT posts.*, (SELECT count(likes.id) FROM likes
                            WHERE likes.post_id = posts.id) AS likes_count
           FROM posts ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset
           SELECT users.*    WHERE users.id IN (...)
           SELECT comments.* WHERE comments.post_id IN (...)  (+ their authors)

Ordering: newest first; ties on created_at are broken by id so pages are stable.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialnet.models.comment import Comment
from socialnet.models.like import Like
from socialnet.models.post import Post


def likes_count_column():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
        .label("likes_count")
    )


def _timeline_query():
    return (
        select(Post, likes_count_column())
        .options(
            selectinload(Post.author),
            selectinload(Post.comments).selectinload(Comment.author),
        )
        .order_by(Post.created_at.desc(), Post.id.desc())
    )


class PostRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: Dict[str, Any]) -> Post:
        post = Post(**data)
        self.db.add(post)
        await self.db.flush()
        return post

    async def get(self, post_id: int) -> Optional[Post]:
        """Plain row lookup, no relationships; used for existence and ownership checks."""
        return await self.db.get(Post, post_id)

    async def find_by_id(self, post_id: int) -> Optional[Tuple[Post, int]]:
        result = await self.db.execute(_timeline_query().where(Post.id == post_id))
        row = result.first()
        if row is None:
            return None
        return row[0], row[1] or 0

    async def find_all(self, limit: int, offset: int) -> List[Tuple[Post, int]]:
        result = await self.db.execute(_timeline_query().limit(limit).offset(offset))
        return [(post, count or 0) for post, count in result.all()]

    async def find_by_user_id(
        self, user_id: int, limit: int, offset: int
    ) -> List[Tuple[Post, int]]:
        query = _timeline_query().where(Post.user_id == user_id).limit(limit).offset(offset)
        result = await self.db.execute(query)
        return [(post, count or 0) for post, count in result.all()]

    async def update(self, post: Post, data: Dict[str, Any]) -> Post:
        for field, value in data.items():
            setattr(post, field, value)
        await self.db.flush()
        return post

    async def delete(self, post: Post) -> None:
        # comments and likes go with it via ON DELETE CASCADE
        await self.db.delete(post)
        await self.db.flush()
