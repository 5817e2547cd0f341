"""
Guest repository.
"""

from innkeeper.models.guest import Guest
from innkeeper.repositories.base import TenantScopedRepository


class GuestRepository(TenantScopedRepository[Guest]):
    model = Guest
    resource_name = "Guest"
