"""
SocialNet Backend — Comment SQLAlchemy Model
==============================================

What:  ORM model for the `comments` table. A comment belongs to one post and
       one author; it goes away with either of them.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.database import Base
from socialnet.models.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from socialnet.models.post import Post
    from socialnet.models.user import User

COMMENT_CONTENT_MAX_LENGTH = 150


class Comment(IdMixin, TimestampMixin, Base):
    """A comment of at most 150 characters on a post."""

    __tablename__ = "comments"

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
    content: Mapped[str] = mapped_column(Text, nullable=False)

    post: Mapped["Post"] = relationship(back_populates="comments")
    author: Mapped["User"] = relationship(back_populates="comments")

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, user_id={self.user_id})>"
