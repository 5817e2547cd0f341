from innkeeper.models.reservation.reservation import (
    CONFIRMATION_NUMBER_CONSTRAINT,
    RESERVATION_OVERLAP_CONSTRAINT,
    Reservation,
)

__all__ = ["Reservation", "RESERVATION_OVERLAP_CONSTRAINT", "CONFIRMATION_NUMBER_CONSTRAINT"]
