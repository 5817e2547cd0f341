"""
Tenant model: an isolated business account owning every other record.
"""

from datetime import date as Date
from typing import Optional

from sqlalchemy import Boolean, Date as SQLDate, String
from sqlalchemy.orm import Mapped, mapped_column

from innkeeper.models.base.base_model import TimestampModel
from innkeeper.models.base.mixins import SoftDeleteMixin, UUIDMixin

__all__ = ["Tenant"]


class Tenant(UUIDMixin, TimestampModel, SoftDeleteMixin):
    """
    Business account. Deactivation is a tombstone (deleted_at), never a
    hard delete.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    subscription_plan: Mapped[str] = mapped_column(String(50), nullable=False, default="basic")
    subscription_start_date: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)
    subscription_end_date: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)
    is_trial_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def is_subscription_active(self, on: Optional[Date] = None) -> bool:
        """True during a trial or while `on` (default today) falls inside the window."""
        if self.is_trial_active:
            return True
        on = on or Date.today()
        if self.subscription_start_date and on < self.subscription_start_date:
            return False
        if self.subscription_end_date and on > self.subscription_end_date:
            return False
        return True

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name!r})>"
