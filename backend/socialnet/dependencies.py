"""
SocialNet Backend — Request Dependencies
==========================================

What:  FastAPI dependencies for bearer-token authentication and pagination.

    get_current_user   → TokenUser, or 401 "Unauthorized access"
    get_optional_user  → TokenUser or None; an invalid token counts as anonymous
    get_bearer_token   → raw token string or None (for /users/verify)
    get_pagination     → validated limit/offset query parameters

Authentication is stateless: the token signature and expiry are checked,
the database is not consulted.
"""

from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from socialnet.exceptions import AuthenticationError
from socialnet.schemas.common import PaginationParams
from socialnet.schemas.user import TokenUser
from socialnet.security import decode_access_token

# auto_error=False: a missing header becomes our 401 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def _user_from_token(token: Optional[str]) -> Optional[TokenUser]:
    payload = decode_access_token(token) if token else None
    if payload is None:
        return None
    return TokenUser.model_validate(payload)


async def get_current_user(token: Optional[str] = Depends(get_bearer_token)) -> TokenUser:
    user = _user_from_token(token)
    if user is None:
        raise AuthenticationError()
    return user


async def get_optional_user(token: Optional[str] = Depends(get_bearer_token)) -> Optional[TokenUser]:
    return _user_from_token(token)


async def get_pagination(
    limit: int = Query(default=10, ge=1, le=100, description="Items per page"),
    offset: int = Query(default=0, ge=0, description="Items to skip"),
) -> PaginationParams:
    return PaginationParams(limit=limit, offset=offset)
