"""
SocialNet Backend — Comment Repository
========================================

Comments under a post are listed oldest first (conversation order) via
idx_comments_post_id; a user's own comments are listed newest first.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialnet.models.comment import Comment


class CommentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: Dict[str, Any]) -> Comment:
        comment = Comment(**data)
        self.db.add(comment)
        await self.db.flush()
        return comment

    async def find_by_id(self, comment_id: int) -> Optional[Comment]:
        return await self.db.get(Comment, comment_id)

    async def find_by_post_id(self, post_id: int, limit: int, offset: int) -> List[Comment]:
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def find_by_user_id(self, user_id: int, limit: int, offset: int) -> List[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_by_post_id(self, post_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        return result.scalar() or 0

    async def update(self, comment: Comment, data: Dict[str, Any]) -> Comment:
        for field, value in data.items():
            setattr(comment, field, value)
        await self.db.flush()
        return comment

    async def delete(self, comment: Comment) -> None:
        await self.db.delete(comment)
        await self.db.flush()
