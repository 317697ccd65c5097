"""
SocialNet Backend — ORM Models
================================

Importing this package registers every table on `Base.metadata`
(used by Alembic, the seed script and the test fixtures).

    users ──< posts ──< comments
      │         │
      │         └────< likes >── users
      └──────────────< comments
"""

from socialnet.models.user import User
from socialnet.models.post import Post
from socialnet.models.comment import Comment
from socialnet.models.like import Like

__all__ = ["User", "Post", "Comment", "Like"]
