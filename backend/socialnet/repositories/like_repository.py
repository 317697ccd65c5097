"""
SocialNet Backend — Like Repository
=====================================

What:  Toggle and list likes.
Invariant: one row per (post_id, user_id); uq_likes_post_user rejects a
           second insert, so a concurrent double-like fails at flush instead
           of producing a duplicate.
"""

from typing import Dict, List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from socialnet.models.like import Like


class LikeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_one(self, post_id: int, user_id: int) -> Optional[Like]:
        result = await self.db.execute(
            select(Like).where(Like.post_id == post_id, Like.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def toggle(self, post_id: int, user_id: int) -> Dict[str, Union[str, bool]]:
        """Likes the post if `user_id` has not liked it yet, otherwise removes the like."""
        existing = await self.find_one(post_id, user_id)
        if existing is not None:
            await self.db.delete(existing)
            await self.db.flush()
            return {"action": "unliked", "liked": False}

        self.db.add(Like(post_id=post_id, user_id=user_id))
        await self.db.flush()
        return {"action": "liked", "liked": True}

    async def find_by_post_id(self, post_id: int, limit: int, offset: int) -> List[Like]:
        result = await self.db.execute(
            select(Like)
            .options(selectinload(Like.user))
            .where(Like.post_id == post_id)
            .order_by(Like.created_at.desc(), Like.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def find_by_user_id(self, user_id: int, limit: int, offset: int) -> List[Like]:
        result = await self.db.execute(
            select(Like)
            .options(selectinload(Like.post))
            .where(Like.user_id == user_id)
            .order_by(Like.created_at.desc(), Like.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_by_post_id(self, post_id: int) -> int:
        result = await self.db.execute(select(func.count(Like.id)).where(Like.post_id == post_id))
        return result.scalar() or 0
