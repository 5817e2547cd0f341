from innkeeper.services.common.permissions import (
    CAN_MANAGE_PAYMENTS,
    CAN_MANAGE_RESERVATIONS,
    CAN_MANAGE_ROOMS,
    CallerIdentity,
    ensure_permission,
)

__all__ = [
    "CAN_MANAGE_PAYMENTS",
    "CAN_MANAGE_RESERVATIONS",
    "CAN_MANAGE_ROOMS",
    "CallerIdentity",
    "ensure_permission",
]
