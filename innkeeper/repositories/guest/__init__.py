from innkeeper.repositories.guest.guest_repository import GuestRepository

__all__ = ["GuestRepository"]
