"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and abstract base classes shared by
all database models.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, Dict, List, Optional, Type
from uuid import UUID

from sqlalchemy import DateTime, Enum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_column_type(enum_cls: Type[PyEnum], name: str) -> Enum:
    """
    Enum column persisted by value ('checked_in', not 'CHECKED_IN') as a
    plain string, so raw SQL constraints can reference the values.
    """
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )


class Base(DeclarativeBase):
    """Declarative base for all innkeeper models."""


class BaseModel(Base):
    """
    Abstract base model with common helpers.
    """

    __abstract__ = True

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to a JSON-friendly dictionary.

        Args:
            exclude: List of column names to exclude
        """
        exclude = exclude or []
        result: Dict[str, Any] = {}

        for column in self.__table__.columns:
            if column.key in exclude:
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            elif isinstance(value, UUID):
                result[column.key] = str(value)
            elif isinstance(value, Decimal):
                result[column.key] = str(value)
            elif isinstance(value, PyEnum):
                result[column.key] = value.value
            else:
                result[column.key] = value

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampModel(BaseModel):
    """
    Abstract base adding created_at/updated_at.

    Timestamps are assigned client side so insertion order is preserved at
    sub-second resolution on every backend.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
        comment="Record creation timestamp (UTC)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="Record last update timestamp (UTC)",
    )
