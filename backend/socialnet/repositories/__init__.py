"""
Data-access layer: one repository per table, each bound to an AsyncSession.

Repositories flush but never commit; the request-scoped session in
`socialnet.database.get_db_session` owns the transaction.
"""

from socialnet.repositories.comment_repository import CommentRepository
from socialnet.repositories.like_repository import LikeRepository
from socialnet.repositories.post_repository import PostRepository
from socialnet.repositories.user_repository import UserRepository

__all__ = ["UserRepository", "PostRepository", "CommentRepository", "LikeRepository"]
