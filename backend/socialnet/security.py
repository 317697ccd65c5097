"""
SocialNet Backend — Password Hashing & Access Tokens
======================================================

What:  bcrypt password hashing (passlib) and HS256 signed access tokens (PyJWT).
Who:   UserService (register/login/verify) and the auth dependencies.

Token payload:
    {"id": <user id>, "username": ..., "email": ..., "iat": ..., "exp": ...}
    Expiry is `settings.jwt_expires_minutes` after issue.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from socialnet.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Returns False for a wrong password and for a hash passlib cannot identify."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError) as e:
        logger.warning("Password verification failed on a malformed hash: %s", e)
        return False


def create_access_token(
    user: Any,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Signs an access token for `user` (anything with id, username and email).

    Args:
        user: ORM User or equivalent object
        expires_delta: Lifetime override; defaults to jwt_expires_minutes
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expires_minutes))
    payload = {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verifies signature and expiry of `token`.

    Returns the payload, or None when the token is expired, tampered with,
    signed with another key, or lacks the integer `id` and string
    `username`/`email` claims.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        return None
    except jwt.PyJWTError as e:
        logger.debug("Rejected invalid access token: %s", e)
        return None

    if not isinstance(payload.get("id"), int):
        return None
    if not all(isinstance(payload.get(claim), str) for claim in ("username", "email")):
        logger.debug("Rejected access token without identity claims")
        return None
    return payload
