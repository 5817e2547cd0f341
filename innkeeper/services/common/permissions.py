"""
Caller identity and permission checks.

The identity is established by the API layer from a bearer token; the
service layer only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional
from uuid import UUID

from innkeeper.core.exceptions import PermissionDeniedError

__all__ = [
    "CAN_MANAGE_RESERVATIONS",
    "CAN_MANAGE_PAYMENTS",
    "CAN_MANAGE_ROOMS",
    "CallerIdentity",
    "ensure_permission",
]

CAN_MANAGE_RESERVATIONS = "can_manage_reservations"
CAN_MANAGE_PAYMENTS = "can_manage_payments"
CAN_MANAGE_ROOMS = "can_manage_rooms"


@dataclass(frozen=True)
class CallerIdentity:
    """
    Represents an authenticated caller in the service layer.

    Attributes:
        user_id: Unique identifier for the user
        tenant_id: Tenant every request of this caller is scoped to
        role: Caller's role name
        permissions: Fine-grained permission flags
    """

    user_id: UUID
    tenant_id: UUID
    role: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        user_id: UUID,
        tenant_id: UUID,
        role: Optional[str] = None,
        permissions: Optional[Iterable[str]] = None,
    ) -> "CallerIdentity":
        return cls(user_id=user_id, tenant_id=tenant_id, role=role, permissions=frozenset(permissions or ()))

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


def ensure_permission(identity: CallerIdentity, permission: str) -> None:
    """
    Raises:
        PermissionDeniedError: if the caller lacks the permission flag
    """
    if not identity.has_permission(permission):
        raise PermissionDeniedError(permission)
