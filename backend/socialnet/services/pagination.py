"""Limit/offset clamping shared by the list operations of every service."""

from typing import Optional

from socialnet.schemas.common import Pagination

POST_PAGE_CAP = 50
COMMENT_PAGE_CAP = 100


def clamp_pagination(limit: Optional[int], offset: Optional[int], cap: int, default: int) -> Pagination:
    """
    Returns the limit/offset a list query will actually use.

    `limit` is forced into 1..cap (missing → default), `offset` to >= 0.
    The result is echoed back to clients in the `pagination` field.
    """
    effective_limit = default if limit is None else limit
    effective_limit = min(max(1, effective_limit), cap)
    effective_offset = max(0, offset or 0)
    return Pagination(limit=effective_limit, offset=effective_offset)
