"""
SocialNet Backend — Shared Response Schemas
=============================================

What:  The success envelope, pagination metadata, error and health models
       shared by every route module.

Success envelope:
    {"success": true, "message": "...", "data": ...}
    List endpoints add {"pagination": {"limit": n, "offset": n}} carrying the
    limit/offset the service actually applied.

Error envelope (built by the handlers in main.py):
    {"success": false, "error": "not_found", "message": "...", "request_id": "..."}
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    limit: int = Field(description="Effective page size")
    offset: int = Field(description="Effective number of skipped items")


class PaginationParams(BaseModel):
    """Validated `limit`/`offset` query parameters, before service-level clamping."""
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PaginatedResponse(ApiResponse[T], Generic[T]):
    pagination: Pagination


class MessageResponse(BaseModel):
    """Success envelope for operations without a payload (deletes)."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class DatabaseHealth(BaseModel):
    connected: bool
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = Field(description="OK when the database is reachable, otherwise ERROR")
    timestamp: datetime
    uptime_seconds: float
    version: str
    database: DatabaseHealth
