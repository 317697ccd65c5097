"""
SocialNet Backend — User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table.
Who:   UserRepository (CRUD), the auth dependencies (lookup by token id),
       Alembic (schema).

Column notes:
    - username / email: both unique; lookups by either are indexed
    - password_hash: bcrypt hash, never serialized to clients
    - age / city: optional profile fields, the only user-editable ones
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from socialnet.database import Base
from socialnet.models.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from socialnet.models.comment import Comment
    from socialnet.models.like import Like
    from socialnet.models.post import Post


class User(IdMixin, TimestampMixin, Base):
    """A registered account."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    posts: Mapped[List["Post"]] = relationship(
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes: Mapped[List["Like"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("age IS NULL OR (age >= 1 AND age <= 150)", name="ck_users_age_range"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
