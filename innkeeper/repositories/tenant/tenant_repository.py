"""
Tenant lookups. Tenants are the scoping root, so this repository is the
only one not bound to a tenant id.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from innkeeper.models.tenant import Tenant


class TenantRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, tenant_id: UUID, include_deleted: bool = False) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        if not include_deleted:
            stmt = stmt.where(Tenant.is_active)
        return self.db.scalars(stmt).first()
