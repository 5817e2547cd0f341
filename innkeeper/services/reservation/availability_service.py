"""
Room availability: the single answer to "is this room free for these dates".

Stays are day-granular half-open intervals [check_in, check_out); a stay
ending on the day another starts does not conflict. Checks here are
read-only and must be repeated inside the writing transaction.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from innkeeper.models.base.enums import ReservationStatus
from innkeeper.models.property import Room
from innkeeper.models.reservation import Reservation
from innkeeper.repositories.property import RoomRepository
from innkeeper.repositories.reservation import ReservationRepository
from innkeeper.services.reservation.pricing_service import PricingCalculator
from innkeeper.utils.datetime_utils import DateLike, DateTimeHelper


@dataclass(frozen=True)
class ConflictSummary:
    reservation_id: UUID
    confirmation_number: str
    check_in_date: date
    check_out_date: date
    status: ReservationStatus

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ConflictSummary":
        return cls(
            reservation_id=reservation.id,
            confirmation_number=reservation.confirmation_number,
            check_in_date=reservation.check_in_date,
            check_out_date=reservation.check_out_date,
            status=reservation.status,
        )


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflict: Optional[ConflictSummary] = None


@dataclass(frozen=True)
class RoomAvailability:
    """A free room annotated with the price of the requested stay."""

    room: Room
    nights: int
    base_price: Decimal
    total_price: Decimal
    currency: str


class RoomAvailabilityService:
    """
    Read-only availability queries for one tenant.
    """

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id
        self.reservations = ReservationRepository(db, tenant_id)
        self.rooms = RoomRepository(db, tenant_id)

    def is_available(
        self,
        room_id: UUID,
        check_in: DateLike,
        check_out: DateLike,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> AvailabilityResult:
        """
        Whether the room has no active pending/confirmed/checked-in
        reservation overlapping [check_in, check_out).

        The reported conflict is the earliest overlapping stay, ties broken
        by creation order. Persistence errors propagate.
        """
        start = DateTimeHelper.to_date(check_in)
        end = DateTimeHelper.to_date(check_out)

        conflicts = self.reservations.find_conflicts(room_id, start, end, exclude_reservation_id)
        if not conflicts:
            return AvailabilityResult(available=True)
        return AvailabilityResult(available=False, conflict=ConflictSummary.from_reservation(conflicts[0]))

    def search(
        self,
        check_in: DateLike,
        check_out: DateLike,
        adults: int,
        children: int = 0,
        property_id: Optional[UUID] = None,
    ) -> List[RoomAvailability]:
        """
        Rooms that fit the party and have zero conflicting reservations,
        each priced for the stay. Rooms under maintenance are skipped.
        """
        start = DateTimeHelper.to_date(check_in)
        end = DateTimeHelper.to_date(check_out)
        nights = DateTimeHelper.nights_between(start, end)

        candidates = self.rooms.find_bookable(property_id=property_id, min_capacity=adults + children)
        busy = self.reservations.find_conflicting_room_ids((r.id for r in candidates), start, end)

        return [
            RoomAvailability(
                room=room,
                nights=nights,
                base_price=Decimal(room.base_price),
                total_price=PricingCalculator.room_cost(room, nights, adults, children),
                currency=room.currency,
            )
            for room in candidates
            if room.id not in busy
        ]
