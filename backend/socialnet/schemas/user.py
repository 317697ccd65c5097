"""
SocialNet Backend — User Request/Response Schemas
===================================================

Request models validate the shape of incoming JSON (lengths, ranges, email
syntax). Response models control exactly which user fields leave the API:
the password hash never does, and public lookups by username omit the email.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=12)
    age: Optional[int] = Field(default=None, ge=1, le=150)
    city: Optional[str] = Field(default=None, max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserUpdate(BaseModel):
    """
    Only age and city are editable; omitted fields are left unchanged.
    An explicit null is rejected, so a field once set cannot be cleared.
    """
    age: Optional[int] = Field(default=None, ge=1, le=150)
    city: Optional[str] = Field(default=None, max_length=100)

    @field_validator("age", "city", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserPublic(BaseModel):
    """The account as seen by its owner."""
    id: int
    username: str
    email: str
    age: Optional[int] = None
    city: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfilePublic(BaseModel):
    """The account as seen by anyone else."""
    id: int
    username: str
    age: Optional[int] = None
    city: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenUser(BaseModel):
    """Identity carried by a verified access token."""
    id: int
    username: str
    email: str


class TokenPayload(TokenUser):
    iat: Optional[int] = None
    exp: Optional[int] = None


class LoginResult(BaseModel):
    user: UserPublic
    token: str
