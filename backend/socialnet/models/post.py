"""
SocialNet Backend — Post SQLAlchemy Model
===========================================

What:  ORM model for the `posts` table.

Query patterns:
    - Timeline: ORDER BY created_at DESC, id DESC LIMIT/OFFSET
      → idx_posts_created_at
    - A user's posts: WHERE user_id = :id ORDER BY created_at DESC
      → idx_posts_user_id
    - Detail: primary key lookup plus author, comments (oldest first) and
      a likes count subquery

Deleting a post removes its comments and likes (ON DELETE CASCADE).
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.database import Base
from socialnet.models.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from socialnet.models.comment import Comment
    from socialnet.models.like import Like
    from socialnet.models.user import User

POST_CONTENT_MAX_LENGTH = 300


class Post(IdMixin, TimestampMixin, Base):
    """A text post of at most 300 characters."""

    __tablename__ = "posts"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped["User"] = relationship(back_populates="posts")
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[Comment.created_at, Comment.id]",
    )
    likes: Mapped[List["Like"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id})>"
