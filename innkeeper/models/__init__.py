"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from innkeeper.models.base import Base
from innkeeper.models.guest import Guest
from innkeeper.models.payment import Payment
from innkeeper.models.property import Property, Room
from innkeeper.models.reservation import Reservation
from innkeeper.models.tenant import Tenant

__all__ = ["Base", "Tenant", "Property", "Room", "Guest", "Reservation", "Payment"]
