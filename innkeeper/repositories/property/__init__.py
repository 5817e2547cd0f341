from innkeeper.repositories.property.property_repository import PropertyRepository
from innkeeper.repositories.property.room_repository import RoomRepository

__all__ = ["PropertyRepository", "RoomRepository"]
