"""
FastAPI dependencies: database session, caller identity, permission
guards and service factories.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, TypeVar
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings, get_settings
from innkeeper.core.exceptions import (
    AuthenticationError,
    BaseAppException,
    ErrorCode,
    PermissionDeniedError,
    TenantInactiveError,
)
from innkeeper.core.logging import get_logger, tenant_id as tenant_id_var
from innkeeper.db.session import get_db
from innkeeper.repositories.tenant import TenantRepository
from innkeeper.services.base import ServiceResult
from innkeeper.services.common import CallerIdentity, ensure_permission
from innkeeper.services.payment import PaymentService
from innkeeper.services.reservation import ReservationLifecycleService, ReservationService
from innkeeper.services.room import RoomStatusService
from innkeeper.utils.datetime_utils import DateTimeHelper

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

T = TypeVar("T")


# ------------------------------------------------------------------ #
# Current caller
# ------------------------------------------------------------------ #
def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CallerIdentity:
    """
    Decode the bearer token and return the caller's identity.

    Claims: `sub` (user id), `tenant_id`, `role`, `permissions`. The
    tenant must exist, be active and hold a current subscription.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid authentication token")

    try:
        user_id = UUID(str(payload["sub"]))
        caller_tenant_id = UUID(str(payload["tenant_id"]))
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token claims")

    tenant = TenantRepository(db).find_by_id(caller_tenant_id)
    if tenant is None:
        raise TenantInactiveError("Tenant is inactive or does not exist")
    if not tenant.is_subscription_active(DateTimeHelper.today(settings.TIMEZONE)):
        raise TenantInactiveError("Tenant subscription has expired")

    tenant_id_var.set(str(caller_tenant_id))
    return CallerIdentity.build(
        user_id=user_id,
        tenant_id=caller_tenant_id,
        role=payload.get("role"),
        permissions=payload.get("permissions") or (),
    )


def require_permission(permission: str) -> Callable[..., CallerIdentity]:
    """Dependency factory rejecting callers without the permission flag."""

    def dependency(identity: CallerIdentity = Depends(get_current_identity)) -> CallerIdentity:
        try:
            ensure_permission(identity, permission)
        except PermissionDeniedError:
            logger.warning(
                "Permission denied",
                extra={"user_id": str(identity.user_id), "permission": permission},
            )
            raise
        return identity

    return dependency


# ------------------------------------------------------------------ #
# Service factories
# ------------------------------------------------------------------ #
def get_reservation_service(
    db: Session = Depends(get_db),
    identity: CallerIdentity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
) -> ReservationService:
    return ReservationService(db, identity.tenant_id, settings)


def get_lifecycle_service(
    db: Session = Depends(get_db),
    identity: CallerIdentity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
) -> ReservationLifecycleService:
    return ReservationLifecycleService(db, identity.tenant_id, settings)


def get_payment_service(
    db: Session = Depends(get_db),
    identity: CallerIdentity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
) -> PaymentService:
    return PaymentService(db, identity.tenant_id, settings)


def get_room_status_service(
    db: Session = Depends(get_db),
    identity: CallerIdentity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
) -> RoomStatusService:
    return RoomStatusService(db, identity.tenant_id, settings)


# ------------------------------------------------------------------ #
# Result unwrapping
# ------------------------------------------------------------------ #
_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.AUTHENTICATION_FAILED: 401,
    ErrorCode.INSUFFICIENT_PERMISSIONS: 403,
    ErrorCode.TENANT_INACTIVE: 403,
    ErrorCode.DUPLICATE_RESOURCE: 409,
    ErrorCode.INVALID_DATE_RANGE: 422,
    ErrorCode.CAPACITY_EXCEEDED: 422,
    ErrorCode.ROOM_CONFLICT: 409,
    ErrorCode.INVALID_STATE_TRANSITION: 409,
    ErrorCode.INVALID_STATE: 409,
    ErrorCode.AMOUNT_EXCEEDS_AVAILABLE: 422,
    ErrorCode.EXCEEDS_REMAINING_BALANCE: 422,
}


class ServiceFailure(BaseAppException):
    """A failed ServiceResult re-raised at the HTTP boundary."""


def unwrap_result(result: ServiceResult[T]) -> T:
    """Return the result's data or raise its error for the exception handlers."""
    if result.is_success:
        return result.data
    error = result.error
    raise ServiceFailure(
        error.message,
        error.code,
        error.details,
        _STATUS_BY_CODE.get(error.code, 500),
    )
