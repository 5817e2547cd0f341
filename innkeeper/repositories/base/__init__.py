from innkeeper.repositories.base.base_repository import ModelType, TenantScopedRepository

__all__ = ["ModelType", "TenantScopedRepository"]
