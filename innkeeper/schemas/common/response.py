"""
Standard API response wrappers.
"""

from typing import Generic, List, TypeVar, Union

from pydantic import Field

from innkeeper.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "PaginationMeta",
    "PaginatedResponse",
    "MessageResponse",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")

    @classmethod
    def create(cls, message: str, data: Union[T, None] = None):
        """Create success response."""
        return cls(success=True, message=message, data=data)


class PaginationMeta(BaseSchema):
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=(total + page_size - 1) // page_size,
        )


class PaginatedResponse(BaseSchema, Generic[T]):
    """Success response carrying one page of items."""

    success: bool = Field(default=True)
    message: str = Field(default="OK")
    data: List[T] = Field(default_factory=list)
    pagination: PaginationMeta


class MessageResponse(BaseSchema):
    success: bool = Field(default=True)
    message: str
