from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class IDModel(BaseModel):
    """Base schema exposing a UUID primary key."""
    id: UUID = Field(..., description="Unique identifier")


class Timestamps(BaseModel):
    """Common created/updated timestamp fields."""
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC)")


class PageParams(BaseModel):
    """Page/limit window; limit is clamped to MAX_PAGE_SIZE."""
    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    """Pagination block of every list response."""
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            totalPages=total_pages,
            hasNext=page < total_pages,
            hasPrev=page > 1,
        )


class Page(BaseModel, Generic[T]):
    """List response envelope."""
    data: List[T]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""
    error: str = Field(..., description="Human-readable error message")
    details: Optional[str] = Field(default=None, description="Optional extra information")


def update_values(payload: BaseModel, nullable: Iterable[str] = ()) -> Dict[str, Any]:
    """Fields set on a partial update; explicit nulls are kept only for nullable columns."""
    keep_null = set(nullable)
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in keep_null
    }
