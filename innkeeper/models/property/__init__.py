from innkeeper.models.property.property import Property
from innkeeper.models.property.room import Room

__all__ = ["Property", "Room"]
