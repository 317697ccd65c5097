"""
SocialNet Backend — Like SQLAlchemy Model
===========================================

What:  ORM model for the `likes` table.
Invariant: at most one like per (post, user) — enforced by
           uq_likes_post_user, toggled by LikeRepository.toggle().
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.database import Base
from socialnet.models.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from socialnet.models.post import Post
    from socialnet.models.user import User


class Like(IdMixin, TimestampMixin, Base):
    __tablename__ = "likes"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    post: Mapped["Post"] = relationship(back_populates="likes")
    user: Mapped["User"] = relationship(back_populates="likes")

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
        Index("idx_likes_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Like(post_id={self.post_id}, user_id={self.user_id})>"
