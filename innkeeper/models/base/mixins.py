"""
SQLAlchemy model mixins for reusable functionality.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Uuid
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from innkeeper.models.base.base_model import utcnow


class UUIDMixin:
    """
    Mixin for UUID primary key.
    """

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        comment="Unique identifier (UUID v4)",
    )


class SoftDeleteMixin:
    """
    Single tombstone representation for every entity.

    A record is active while deleted_at is NULL; is_active is derived from
    it and works both on instances and inside queries.
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        comment="Deletion timestamp (UTC); NULL while active",
    )
    deleted_by: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        nullable=True,
        comment="User who deleted the record",
    )

    @hybrid_property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @is_active.inplace.expression
    @classmethod
    def _is_active_expression(cls):
        return cls.deleted_at.is_(None)

    def soft_delete(self, deleted_by: Optional[UUID] = None) -> None:
        self.deleted_at = utcnow()
        self.deleted_by = deleted_by


class TenantMixin:
    """Mixin binding a record to its owning tenant."""

    @declared_attr
    def tenant_id(cls) -> Mapped[UUID]:
        return mapped_column(
            Uuid,
            ForeignKey("tenants.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
            comment="Owning tenant",
        )


class AuditMixin:
    """Mixin recording which user created and last updated a record."""

    created_by: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        nullable=True,
        comment="User who created the record",
    )
    updated_by: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        nullable=True,
        comment="User who last updated the record",
    )
