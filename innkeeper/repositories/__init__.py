from innkeeper.repositories.base import TenantScopedRepository
from innkeeper.repositories.guest import GuestRepository
from innkeeper.repositories.payment import PaymentRepository
from innkeeper.repositories.property import PropertyRepository, RoomRepository
from innkeeper.repositories.reservation import ReservationRepository
from innkeeper.repositories.tenant import TenantRepository

__all__ = [
    "TenantScopedRepository",
    "GuestRepository",
    "PaymentRepository",
    "PropertyRepository",
    "RoomRepository",
    "ReservationRepository",
    "TenantRepository",
]
