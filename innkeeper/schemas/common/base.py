"""
Base schema classes with common configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    JSON field names are camelCase; snake_case input is accepted as well.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        # Keep enums as Enum instances; callers can still access `.value`.
        use_enum_values=False,
        str_strip_whitespace=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create requests."""


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for partial updates.

    Only fields the caller actually sent are applied; use
    `model_dump(exclude_unset=True)` to read them.
    """


class BaseResponseSchema(BaseSchema):
    """Base schema for API responses."""
