"""
Guest stay statistics and VIP promotion.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings
from innkeeper.core.logging import get_logger
from innkeeper.models.guest import Guest
from innkeeper.repositories.guest import GuestRepository

logger = get_logger(__name__)


class GuestStatsService:
    def __init__(self, db: Session, tenant_id: UUID, settings: Settings):
        self.guests = GuestRepository(db, tenant_id)
        self.settings = settings

    def record_stay(self, guest_id: UUID, amount: Decimal) -> Guest:
        guest = self.guests.get_by_id(guest_id)
        was_vip = guest.is_vip
        guest.record_stay(amount, self.settings.VIP_STAY_THRESHOLD, self.settings.VIP_SPEND_THRESHOLD)
        self.guests.save(guest)

        if guest.is_vip and not was_vip:
            logger.info("Guest promoted to VIP", extra={"guest_id": str(guest.id)})
        return guest
