"""
Reservation repository: overlap queries, code uniqueness and filtered listing.
"""

from datetime import date
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import asc, desc, exists, select

from innkeeper.models.base.enums import (
    BookingSource,
    ReservationPaymentStatus,
    ReservationStatus,
)
from innkeeper.models.reservation import Reservation
from innkeeper.repositories.base import TenantScopedRepository


class ReservationRepository(TenantScopedRepository[Reservation]):
    model = Reservation
    resource_name = "Reservation"

    # ==================== Availability ====================

    def _overlap_criteria(self, check_in: date, check_out: date, exclude_reservation_id: Optional[UUID]):
        criteria = [
            Reservation.status.in_(ReservationStatus.blocking()),
            Reservation.check_in_date < check_out,
            Reservation.check_out_date > check_in,
        ]
        if exclude_reservation_id is not None:
            criteria.append(Reservation.id != exclude_reservation_id)
        return criteria

    def find_conflicts(
        self,
        room_id: UUID,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> List[Reservation]:
        """
        Active blocking reservations on the room whose [check_in, check_out)
        intersects the given range, earliest stay first, then creation order.
        """
        stmt = self._select(
            Reservation.room_id == room_id,
            *self._overlap_criteria(check_in, check_out, exclude_reservation_id),
        ).order_by(asc(Reservation.check_in_date), asc(Reservation.created_at))
        return list(self.db.scalars(stmt))

    def find_conflicting_room_ids(self, room_ids: Iterable[UUID], check_in: date, check_out: date) -> Set[UUID]:
        """Subset of room_ids with at least one overlapping blocking reservation."""
        room_ids = list(room_ids)
        if not room_ids:
            return set()
        stmt = (
            select(Reservation.room_id)
            .where(
                Reservation.tenant_id == self.tenant_id,
                Reservation.is_active,
                Reservation.room_id.in_(room_ids),
                *self._overlap_criteria(check_in, check_out, None),
            )
            .distinct()
        )
        return set(self.db.scalars(stmt))

    # ==================== Codes ====================

    def confirmation_number_exists(self, confirmation_number: str) -> bool:
        """Global check; confirmation numbers are unique across tenants and tombstones."""
        return bool(
            self.db.scalar(
                select(exists().where(Reservation.confirmation_number == confirmation_number))
            )
        )

    # ==================== Listing ====================

    def search(
        self,
        *,
        property_id: Optional[UUID] = None,
        room_id: Optional[UUID] = None,
        guest_id: Optional[UUID] = None,
        status: Optional[ReservationStatus] = None,
        payment_status: Optional[ReservationPaymentStatus] = None,
        source: Optional[BookingSource] = None,
        check_in_from: Optional[date] = None,
        check_in_to: Optional[date] = None,
        confirmation_number: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Reservation], int]:
        stmt = self._select()
        if property_id is not None:
            stmt = stmt.where(Reservation.property_id == property_id)
        if room_id is not None:
            stmt = stmt.where(Reservation.room_id == room_id)
        if guest_id is not None:
            stmt = stmt.where(Reservation.guest_id == guest_id)
        if status is not None:
            stmt = stmt.where(Reservation.status == status)
        if payment_status is not None:
            stmt = stmt.where(Reservation.payment_status == payment_status)
        if source is not None:
            stmt = stmt.where(Reservation.source == source)
        if check_in_from is not None:
            stmt = stmt.where(Reservation.check_in_date >= check_in_from)
        if check_in_to is not None:
            stmt = stmt.where(Reservation.check_in_date <= check_in_to)
        if confirmation_number:
            stmt = stmt.where(Reservation.confirmation_number.icontains(confirmation_number, autoescape=True))

        stmt = stmt.order_by(desc(Reservation.check_in_date), desc(Reservation.created_at))
        return self.paginate(stmt, page, page_size)

    def list_current(self, today: date) -> List[Reservation]:
        """Checked-in stays covering today."""
        stmt = self._select(
            Reservation.status == ReservationStatus.CHECKED_IN,
            Reservation.check_in_date <= today,
            Reservation.check_out_date > today,
        ).order_by(asc(Reservation.check_out_date))
        return list(self.db.scalars(stmt))
