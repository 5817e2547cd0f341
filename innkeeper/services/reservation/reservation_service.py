"""
Core reservation service: create/update, detail/list queries and
availability lookups.

Creation runs every precondition inside one transaction that holds the
room row lock, so the availability check and the insert cannot be
interleaved with another writer booking the same room. On PostgreSQL the
overlap exclusion constraint backs this up; its violation is reported as
a room conflict.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings
from innkeeper.core.exceptions import (
    CapacityExceededError,
    DuplicateResourceError,
    InvalidDateRangeError,
    InvalidStateTransitionError,
    RepositoryError,
    RoomConflictError,
)
from innkeeper.core.logging import log_execution_time
from innkeeper.models.base.enums import ReservationStatus
from innkeeper.models.property import Property, Room
from innkeeper.models.reservation import RESERVATION_OVERLAP_CONSTRAINT, Reservation
from innkeeper.repositories.guest import GuestRepository
from innkeeper.repositories.property import PropertyRepository, RoomRepository
from innkeeper.repositories.reservation import ReservationRepository
from innkeeper.schemas.reservation import (
    AvailabilityRequest,
    FeesInput,
    ReservationCreate,
    ReservationFilters,
    ReservationUpdate,
)
from innkeeper.services.base import BaseService, ServiceResult
from innkeeper.services.payment.payment_ledger_service import PaymentLedgerService
from innkeeper.services.reservation.availability_service import (
    AvailabilityResult,
    RoomAvailability,
    RoomAvailabilityService,
)
from innkeeper.services.reservation.pricing_service import PricingCalculator, StayFees
from innkeeper.services.reservation.reservation_lifecycle_service import ReservationLifecycleService
from innkeeper.utils.code_generator import generate_confirmation_number
from innkeeper.utils.datetime_utils import DateTimeHelper

ZERO = Decimal("0.00")


class ReservationService(BaseService):
    """
    Reservation orchestration: create, update, detail & listings.

    Responsibilities:
    - Validation of dates, capacity and the property booking window
    - Write-time availability check under the room lock
    - Unique confirmation numbers
    - Pricing snapshot and payment summary on every write
    """

    def __init__(self, db_session: Session, tenant_id: UUID, settings: Optional[Settings] = None):
        super().__init__(db_session, tenant_id, settings)
        self.properties = PropertyRepository(db_session, tenant_id)
        self.rooms = RoomRepository(db_session, tenant_id)
        self.guests = GuestRepository(db_session, tenant_id)
        self.reservations = ReservationRepository(db_session, tenant_id)
        self.availability = RoomAvailabilityService(db_session, tenant_id)
        self.ledger = PaymentLedgerService(db_session, tenant_id)
        self.lifecycle = ReservationLifecycleService(db_session, tenant_id, self.settings)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _today(self) -> date:
        return DateTimeHelper.today(self.settings.TIMEZONE)

    def _parse_dates(self, check_in: Any, check_out: Any, reject_past: bool = True) -> Tuple[date, date]:
        """
        Parse and order-check a stay window.

        Raises:
            InvalidDateRangeError: unparseable, check_out <= check_in, or a
                check-in before today when reject_past is set
        """
        try:
            start = DateTimeHelper.to_date(check_in)
            end = DateTimeHelper.to_date(check_out)
        except (ValueError, TypeError, OverflowError) as e:
            raise InvalidDateRangeError(
                "Invalid date format",
                {"check_in_date": str(check_in), "check_out_date": str(check_out), "error": str(e)},
            ) from e

        if end <= start:
            raise InvalidDateRangeError(
                "Check-out date must be after check-in date",
                {"check_in_date": start.isoformat(), "check_out_date": end.isoformat()},
            )
        if reject_past:
            self._reject_past(start)
        return start, end

    def _reject_past(self, check_in: date) -> None:
        today = self._today()
        if check_in < today:
            raise InvalidDateRangeError(
                "Check-in date cannot be in the past",
                {"check_in_date": check_in.isoformat(), "today": today.isoformat()},
            )

    def _validate_booking_window(self, check_in: date, prop: Property) -> None:
        window = prop.advance_booking_days if prop.advance_booking_days is not None else 365
        latest = self._today() + timedelta(days=window)
        if check_in > latest:
            raise InvalidDateRangeError(
                f"Check-in date is beyond the {window}-day booking window",
                {"check_in_date": check_in.isoformat(), "latest_check_in_date": latest.isoformat()},
            )

    @staticmethod
    def _validate_capacity(room: Room, adults: int, children: int) -> None:
        requested = (adults or 0) + (children or 0)
        if requested < 1 or requested > room.total_capacity:
            raise CapacityExceededError(requested, room.total_capacity)

    def _ensure_available(
        self,
        room_id: UUID,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> None:
        result = self.availability.is_available(room_id, check_in, check_out, exclude_reservation_id)
        if not result.available:
            conflict = result.conflict
            raise RoomConflictError(
                conflict.confirmation_number,
                conflict.check_in_date,
                conflict.check_out_date,
                conflict.status.value,
            )

    # -------------------------------------------------------------------------
    # Persistence helpers
    # -------------------------------------------------------------------------

    def _new_confirmation_number(self) -> str:
        attempts = self.settings.CODE_GENERATION_MAX_ATTEMPTS
        for _ in range(attempts):
            code = generate_confirmation_number(self.settings.CONFIRMATION_CODE_PREFIX)
            if not self.reservations.confirmation_number_exists(code):
                return code
        raise DuplicateResourceError("confirmation number", attempts)

    def _conflict_from_integrity_error(self, reservation: Reservation) -> RoomConflictError:
        conflicts = self.reservations.find_conflicts(
            reservation.room_id, reservation.check_in_date, reservation.check_out_date, reservation.id
        )
        if not conflicts:
            return RoomConflictError()
        first = conflicts[0]
        return RoomConflictError(
            first.confirmation_number, first.check_in_date, first.check_out_date, first.status.value
        )

    def _insert(self, reservation: Reservation, actor_id: Optional[UUID]) -> None:
        """
        Insert with a fresh confirmation number, regenerating it when the
        unique index reports a collision.
        """
        attempts = self.settings.CODE_GENERATION_MAX_ATTEMPTS
        for _ in range(attempts):
            reservation.confirmation_number = self._new_confirmation_number()
            try:
                with self.db.begin_nested():
                    self.reservations.add(reservation, actor_id)
                return
            except IntegrityError as e:
                message = str(e.orig)
                if RESERVATION_OVERLAP_CONSTRAINT in message:
                    raise self._conflict_from_integrity_error(reservation) from e
                if "confirmation_number" not in message:
                    raise RepositoryError(f"Create Reservation failed: {message}") from e
                self._logger.warning(
                    "Confirmation number collision, regenerating",
                    extra={"confirmation_number": reservation.confirmation_number},
                )
        raise DuplicateResourceError("confirmation number", attempts)

    def _save(self, reservation: Reservation, actor_id: Optional[UUID]) -> None:
        try:
            with self.db.begin_nested():
                self.reservations.save(reservation, actor_id)
        except IntegrityError as e:
            message = str(e.orig)
            if RESERVATION_OVERLAP_CONSTRAINT in message:
                raise self._conflict_from_integrity_error(reservation) from e
            raise RepositoryError(f"Update Reservation failed: {message}") from e

    @staticmethod
    def _fees_of(reservation: Reservation) -> StayFees:
        return StayFees(
            cleaning=reservation.cleaning_fee or ZERO,
            service=reservation.service_fee or ZERO,
            extra=reservation.extra_fee or ZERO,
        )

    @staticmethod
    def _stay_fees(fees: Optional[FeesInput]) -> StayFees:
        if fees is None:
            return StayFees()
        return StayFees(cleaning=fees.cleaning_fee, service=fees.service_fee, extra=fees.extra_fee)

    # -------------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------------

    def check_availability(
        self,
        room_id: UUID,
        check_in: Any,
        check_out: Any,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> ServiceResult[AvailabilityResult]:
        """Read-only check; a positive answer is re-checked at write time."""
        try:
            start, end = self._parse_dates(check_in, check_out, reject_past=False)
            self.rooms.get_by_id(room_id)
            result = self.availability.is_available(room_id, start, end, exclude_reservation_id)
            return ServiceResult.success(result)
        except Exception as e:
            return self._handle_exception(e, "check room availability", room_id)

    def search_available_rooms(self, request: AvailabilityRequest) -> ServiceResult[List[RoomAvailability]]:
        try:
            start, end = self._parse_dates(request.check_in_date, request.check_out_date, reject_past=False)
            if request.property_id is not None:
                self.properties.get_by_id(request.property_id)
            rooms = self.availability.search(
                start,
                end,
                adults=request.adults,
                children=request.children,
                property_id=request.property_id,
            )
            return ServiceResult.success(
                rooms,
                message=f"{len(rooms)} room(s) available",
                metadata={"count": len(rooms)},
            )
        except Exception as e:
            return self._handle_exception(e, "search available rooms", request.property_id)

    # -------------------------------------------------------------------------
    # Create / Update
    # -------------------------------------------------------------------------

    @log_execution_time()
    def create_reservation(
        self,
        request: ReservationCreate,
        actor_id: Optional[UUID] = None,
    ) -> ServiceResult[Reservation]:
        """
        Create a reservation, pending by default or checked in directly.

        Preconditions, in order: valid dates, property, room in that
        property, guest, capacity, availability.
        """
        try:
            start, end = self._parse_dates(request.dates.check_in_date, request.dates.check_out_date)
            adults, children = request.guests.adults, request.guests.children

            with self.transaction():
                prop = self.properties.get_by_id(request.property_id)
                self._validate_booking_window(start, prop)
                room = self.rooms.get_in_property(request.room_id, prop.id, lock=True)
                guest = self.guests.get_by_id(request.guest_id)
                self._validate_capacity(room, adults, children)
                self._ensure_available(room.id, start, end)

                quote = PricingCalculator.quote(room, start, end, adults, children, self._stay_fees(request.fees))

                reservation = Reservation(
                    property_id=prop.id,
                    room_id=room.id,
                    guest_id=guest.id,
                    check_in_date=start,
                    check_out_date=end,
                    adults=adults,
                    children=children,
                    additional_guests=[g.model_dump(mode="json") for g in request.additional_guests],
                    status=ReservationStatus.PENDING,
                    source=request.source,
                    special_requests=request.special_requests,
                    notes=request.notes,
                    deposit_required=request.deposit_required,
                    refund_amount=ZERO,
                )
                reservation.apply_pricing(**quote.as_reservation_fields())
                reservation.update_payment_summary(ZERO)
                self._insert(reservation, actor_id)

                if request.direct_check_in:
                    reservation.start_stay(actor_id)
                    self.reservations.save(reservation, actor_id)
                    self.lifecycle.run_check_in_side_effects(reservation)

            self._log_operation(
                "Reservation created",
                reservation.id,
                confirmation_number=reservation.confirmation_number,
                room_id=str(reservation.room_id),
                status=reservation.status.value,
                total_price=str(reservation.total_price),
            )
            return ServiceResult.success(reservation, message="Reservation created successfully")
        except Exception as e:
            return self._handle_exception(
                e, "create reservation", request.room_id, {"property_id": str(request.property_id)}
            )

    @log_execution_time()
    def update_reservation(
        self,
        reservation_id: UUID,
        request: ReservationUpdate,
        actor_id: Optional[UUID] = None,
    ) -> ServiceResult[Reservation]:
        """
        Apply a partial update.

        Only the fields sent are re-validated: new dates or a new room
        trigger an availability check that ignores this reservation; new
        guest counts or a new room trigger a capacity check. Pricing is
        re-derived when dates, room, guests or fees change.
        """
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                if reservation.status.is_terminal:
                    raise InvalidStateTransitionError(
                        "update", reservation.status, list(ReservationStatus.blocking())
                    )

                start, end = reservation.check_in_date, reservation.check_out_date
                check_in_changed = False
                if request.dates is not None:
                    new_in = request.dates.check_in_date if request.dates.check_in_date is not None else start
                    new_out = request.dates.check_out_date if request.dates.check_out_date is not None else end
                    start, end = self._parse_dates(new_in, new_out, reject_past=False)
                    check_in_changed = start != reservation.check_in_date
                    if check_in_changed:
                        self._reject_past(start)
                dates_changed = (start, end) != (reservation.check_in_date, reservation.check_out_date)

                room_changed = request.room_id is not None and request.room_id != reservation.room_id
                room = self.rooms.get_in_property(
                    request.room_id or reservation.room_id,
                    reservation.property_id,
                    lock=dates_changed or room_changed,
                )

                if check_in_changed:
                    self._validate_booking_window(start, self.properties.get_by_id(reservation.property_id))

                adults, children = reservation.adults, reservation.children
                if request.guests is not None:
                    adults, children = request.guests.adults, request.guests.children
                guests_changed = (adults, children) != (reservation.adults, reservation.children)

                if guests_changed or room_changed:
                    self._validate_capacity(room, adults, children)
                if dates_changed or room_changed:
                    self._ensure_available(room.id, start, end, exclude_reservation_id=reservation.id)

                previous_room_id = reservation.room_id
                reservation.check_in_date, reservation.check_out_date = start, end
                reservation.room_id = room.id
                reservation.adults, reservation.children = adults, children

                if dates_changed or room_changed or guests_changed or request.fees is not None:
                    fees = self._stay_fees(request.fees) if request.fees is not None else self._fees_of(reservation)
                    quote = PricingCalculator.quote(room, start, end, adults, children, fees)
                    reservation.apply_pricing(**quote.as_reservation_fields())

                if request.additional_guests is not None:
                    reservation.additional_guests = [g.model_dump(mode="json") for g in request.additional_guests]
                if request.source is not None:
                    reservation.source = request.source
                if request.special_requests is not None:
                    reservation.special_requests = request.special_requests
                if request.notes is not None:
                    reservation.notes = request.notes
                if request.deposit_required is not None:
                    reservation.deposit_required = request.deposit_required

                self._save(reservation, actor_id)
                self.ledger.reconcile(reservation)

                if room_changed and reservation.status == ReservationStatus.CHECKED_IN:
                    self.lifecycle.run_room_move_side_effects(reservation, previous_room_id)

            self._log_operation(
                "Reservation updated",
                reservation.id,
                dates_changed=dates_changed,
                room_changed=room_changed,
                guests_changed=guests_changed,
            )
            return ServiceResult.success(reservation, message="Reservation updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update reservation", reservation_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_reservation(self, reservation_id: UUID) -> ServiceResult[Reservation]:
        try:
            reservation = self.reservations.find_by_id(reservation_id)
            if reservation is None:
                return ServiceResult.not_found("Reservation", str(reservation_id))
            return ServiceResult.success(reservation)
        except Exception as e:
            return self._handle_exception(e, "get reservation", reservation_id)

    def list_reservations(self, filters: ReservationFilters) -> ServiceResult[List[Reservation]]:
        """One page of reservations, latest check-in first. Paging info is in metadata."""
        try:
            items, total = self.reservations.search(
                property_id=filters.property_id,
                room_id=filters.room_id,
                guest_id=filters.guest_id,
                status=filters.status,
                payment_status=filters.payment_status,
                source=filters.source,
                check_in_from=filters.check_in_from,
                check_in_to=filters.check_in_to,
                confirmation_number=filters.confirmation_number,
                page=filters.page,
                page_size=filters.page_size,
            )
            return ServiceResult.success(
                items,
                metadata={"page": filters.page, "page_size": filters.page_size, "total": total},
            )
        except Exception as e:
            return self._handle_exception(e, "list reservations")

    def list_current(self) -> ServiceResult[List[Reservation]]:
        """Guests in house today."""
        try:
            return ServiceResult.success(self.reservations.list_current(self._today()))
        except Exception as e:
            return self._handle_exception(e, "list current reservations")

    def delete_reservation(self, reservation_id: UUID, actor_id: Optional[UUID] = None) -> ServiceResult[bool]:
        """Tombstone the reservation; it no longer blocks its room's dates."""
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                self.reservations.soft_delete(reservation, actor_id)

            self._log_operation(
                "Reservation deleted",
                reservation_id,
                confirmation_number=reservation.confirmation_number,
            )
            return ServiceResult.success(True, message="Reservation deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete reservation", reservation_id)
