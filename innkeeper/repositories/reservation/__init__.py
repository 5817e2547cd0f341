from innkeeper.repositories.reservation.reservation_repository import ReservationRepository

__all__ = ["ReservationRepository"]
