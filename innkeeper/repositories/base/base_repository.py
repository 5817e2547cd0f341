"""
Tenant-scoped base repository.

Every repository is constructed for one tenant and every statement it
builds filters by that tenant; there is no ambient query rewriting.
"""

from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from innkeeper.core.exceptions import RepositoryError, ResourceNotFoundError, ValidationError
from innkeeper.core.logging import get_logger
from innkeeper.models.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class TenantScopedRepository(Generic[ModelType]):
    """
    CRUD helpers bound to a (session, tenant_id) pair.

    Subclasses set `model` and `resource_name`.
    """

    model: Type[ModelType]
    resource_name: str = "Resource"

    def __init__(self, db: Session, tenant_id: UUID):
        """
        Args:
            db: Database session
            tenant_id: Tenant every query is restricted to
        """
        if tenant_id is None:
            raise ValueError("tenant_id is required for a tenant-scoped repository")
        self.db = db
        self.tenant_id = tenant_id

    # ==================== Query building ====================

    def _select(self, *criteria: Any, include_deleted: bool = False) -> Select:
        stmt = select(self.model).where(self.model.tenant_id == self.tenant_id, *criteria)
        if not include_deleted:
            stmt = stmt.where(self.model.is_active)
        return stmt

    # ==================== Read operations ====================

    def find_by_id(self, entity_id: UUID, include_deleted: bool = False) -> Optional[ModelType]:
        """Return the tenant's entity or None; inactive entities count as missing."""
        try:
            return self.db.scalars(
                self._select(self.model.id == entity_id, include_deleted=include_deleted)
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find {self.resource_name} by ID failed: {e}") from e

    def get_by_id(self, entity_id: UUID) -> ModelType:
        """
        Raises:
            ResourceNotFoundError: missing, soft-deleted or owned by another tenant
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise ResourceNotFoundError(self.resource_name, entity_id)
        return entity

    def get_for_update(self, entity_id: UUID) -> ModelType:
        """Like get_by_id, holding a row lock until the transaction ends."""
        entity = self.db.scalars(
            self._select(self.model.id == entity_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if entity is None:
            raise ResourceNotFoundError(self.resource_name, entity_id)
        return entity

    def paginate(self, stmt: Select, page: int, page_size: int) -> Tuple[List[ModelType], int]:
        """Apply offset pagination to a statement built from _select."""
        total = self.db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
        items = list(self.db.scalars(stmt.offset((page - 1) * page_size).limit(page_size)))
        return items, total

    # ==================== Write operations ====================

    def add(self, entity: ModelType, actor_id: Optional[UUID] = None) -> ModelType:
        """
        Stage a new entity under this tenant and flush it.

        IntegrityError is left to the caller, which knows which constraint
        it is guarding.
        """
        if getattr(entity, "tenant_id", None) not in (None, self.tenant_id):
            raise ValidationError(
                f"{self.resource_name} belongs to a different tenant", field="tenant_id"
            )
        entity.tenant_id = self.tenant_id
        if actor_id is not None and hasattr(entity, "created_by"):
            entity.created_by = actor_id

        self.db.add(entity)
        try:
            self.db.flush()
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create {self.resource_name} failed: {e}") from e

        logger.debug(f"Created {self.resource_name}", extra={"entity_id": str(entity.id)})
        return entity

    def save(self, entity: ModelType, actor_id: Optional[UUID] = None) -> ModelType:
        """Flush pending changes on an entity this repository loaded."""
        if actor_id is not None and hasattr(entity, "updated_by"):
            entity.updated_by = actor_id
        try:
            self.db.flush()
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            raise RepositoryError(f"Update {self.resource_name} failed: {e}") from e
        return entity

    def soft_delete(self, entity: ModelType, actor_id: Optional[UUID] = None) -> ModelType:
        entity.soft_delete(actor_id)
        return self.save(entity, actor_id)
