"""
SocialNet Backend — Post, Comment and Like Schemas
====================================================

What:  Request bodies for posts/comments and the views returned for them.

View inventory:
    PostRecord      — bare row, returned by create/update
    PostView        — list item: author, comments with authors, likes_count
    PostDetail      — PostView + user_id (owner checks on the client)
    CommentRecord   — bare row, returned by create/update
    CommentListItem — comment with its author's public details
    LikeToggleResult, LikeView, LikedPostView
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from socialnet.models.comment import COMMENT_CONTENT_MAX_LENGTH
from socialnet.models.post import POST_CONTENT_MAX_LENGTH


def _strip_content(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    stripped = value.strip()
    if not stripped:
        raise ValueError("content must not be blank")
    return stripped


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=POST_CONTENT_MAX_LENGTH)

    normalize_content = field_validator("content")(_strip_content)


class PostUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1, max_length=POST_CONTENT_MAX_LENGTH)

    normalize_content = field_validator("content")(_strip_content)


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=COMMENT_CONTENT_MAX_LENGTH)

    normalize_content = field_validator("content")(_strip_content)


class CommentUpdate(CommentCreate):
    pass


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorView(BaseModel):
    username: str

    model_config = ConfigDict(from_attributes=True)


class AuthorDetail(BaseModel):
    id: int
    username: str
    age: Optional[int] = None
    city: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CommentView(BaseModel):
    id: int
    content: str
    created_at: datetime
    author: AuthorView

    model_config = ConfigDict(from_attributes=True)


class CommentRecord(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentListItem(CommentRecord):
    author: AuthorDetail


class PostRecord(BaseModel):
    id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostView(BaseModel):
    id: int
    content: str
    created_at: datetime
    updated_at: datetime
    author: AuthorView
    comments: List[CommentView] = Field(default_factory=list)
    likes_count: int = 0

    @classmethod
    def from_post(cls, post, likes_count: int):
        """Builds the view from a Post loaded with author and comments.author."""
        return cls(
            id=post.id,
            content=post.content,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author=AuthorView.model_validate(post.author),
            comments=[CommentView.model_validate(c) for c in post.comments],
            likes_count=likes_count,
        )


class PostDetail(PostView):
    user_id: int

    @classmethod
    def from_post(cls, post, likes_count: int):
        view = PostView.from_post(post, likes_count)
        return cls(user_id=post.user_id, **view.model_dump())


class LikeToggleResult(BaseModel):
    action: Literal["liked", "unliked"]
    liked: bool


class LikeView(BaseModel):
    id: int
    post_id: int
    user_id: int
    created_at: datetime
    user: AuthorDetail

    model_config = ConfigDict(from_attributes=True)


class LikedPostView(BaseModel):
    id: int
    post_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    post: Optional[PostRecord] = None

    model_config = ConfigDict(from_attributes=True)
