"""
Property repository.
"""

from innkeeper.models.property import Property
from innkeeper.repositories.base import TenantScopedRepository


class PropertyRepository(TenantScopedRepository[Property]):
    model = Property
    resource_name = "Property"
