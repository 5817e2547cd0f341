from innkeeper.models.tenant.tenant import Tenant

__all__ = ["Tenant"]
