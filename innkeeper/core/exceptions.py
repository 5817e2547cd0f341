"""
Custom Exceptions for the innkeeper booking backend

This module defines the exception hierarchy raised by models, repositories
and services. Every exception carries a stable error code and the HTTP
status the API layer renders it with.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    TENANT_INACTIVE = "TENANT_INACTIVE"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"

    # Reservation rules
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    ROOM_CONFLICT = "ROOM_CONFLICT"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"

    # Payment rules
    INVALID_STATE = "INVALID_STATE"
    AMOUNT_EXCEEDS_AVAILABLE = "AMOUNT_EXCEEDS_AVAILABLE"
    EXCEEDS_REMAINING_BALANCE = "EXCEEDS_REMAINING_BALANCE"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when request data fails a business validation"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 422)


class ResourceNotFoundError(BaseAppException):
    """Raised when a tenant-scoped record is missing, inactive or foreign"""

    def __init__(self, resource_type: str, resource_id: Any = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message += f" (ID: {resource_id})"
        super().__init__(
            message,
            ErrorCode.NOT_FOUND,
            {"resource_type": resource_type, "resource_id": str(resource_id) if resource_id is not None else None},
            404,
        )


class DuplicateResourceError(BaseAppException):
    """Raised when unique code generation exhausts its retries"""

    def __init__(self, resource_type: str, attempts: int):
        super().__init__(
            f"Could not generate a unique {resource_type} after {attempts} attempts",
            ErrorCode.DUPLICATE_RESOURCE,
            {"resource_type": resource_type, "attempts": attempts},
            409,
        )


class RepositoryError(BaseAppException):
    """Raised when the persistence layer fails"""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


# ========================================
# Authentication & Authorization Exceptions
# ========================================

class AuthenticationError(BaseAppException):
    """Raised when the caller identity cannot be established"""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED, None, 401)


class PermissionDeniedError(BaseAppException):
    """Raised when the caller lacks a permission flag"""

    def __init__(self, permission: str):
        super().__init__(
            f"Missing permission: {permission}",
            ErrorCode.INSUFFICIENT_PERMISSIONS,
            {"permission": permission},
            403,
        )


class TenantInactiveError(BaseAppException):
    """Raised when the caller's tenant is deactivated or its subscription lapsed"""

    def __init__(self, reason: str):
        super().__init__(reason, ErrorCode.TENANT_INACTIVE, None, 403)


# ========================================
# Reservation Exceptions
# ========================================

class InvalidDateRangeError(BaseAppException):
    """Malformed, inverted, past or out-of-window stay dates"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_DATE_RANGE, details, 422)


class CapacityExceededError(BaseAppException):
    """Guest count outside what the room can hold"""

    def __init__(self, requested: int, capacity: int):
        if requested < 1:
            message = "At least one guest is required"
        else:
            message = f"Room capacity exceeded: {requested} guests requested, capacity is {capacity}"
        super().__init__(
            message,
            ErrorCode.CAPACITY_EXCEEDED,
            {"requested_guests": requested, "capacity": capacity},
            422,
        )


class RoomConflictError(BaseAppException):
    """The room already holds an active reservation overlapping the requested stay"""

    def __init__(
        self,
        confirmation_number: Optional[str] = None,
        check_in_date: Optional[date] = None,
        check_out_date: Optional[date] = None,
        status: Optional[str] = None,
    ):
        conflicting = None
        if confirmation_number is not None:
            conflicting = {
                "confirmationNumber": confirmation_number,
                "dates": {
                    "checkInDate": check_in_date.isoformat() if check_in_date else None,
                    "checkOutDate": check_out_date.isoformat() if check_out_date else None,
                },
                "status": status,
            }
        super().__init__(
            "Room is not available for the selected dates",
            ErrorCode.ROOM_CONFLICT,
            {"conflictingReservation": conflicting},
            409,
        )


class InvalidStateTransitionError(BaseAppException):
    """Illegal reservation status change"""

    def __init__(self, action: str, current_status: Any, allowed_from: Optional[list] = None):
        current = getattr(current_status, "value", current_status)
        super().__init__(
            f"Cannot {action} a reservation with status '{current}'",
            ErrorCode.INVALID_STATE_TRANSITION,
            {
                "action": action,
                "current_status": current,
                "allowed_from": [getattr(s, "value", s) for s in (allowed_from or [])],
            },
            409,
        )


# ========================================
# Payment Exceptions
# ========================================

class InvalidPaymentStateError(BaseAppException):
    """Operation not permitted for the payment's current status"""

    def __init__(self, message: str, current_status: Any = None):
        super().__init__(
            message,
            ErrorCode.INVALID_STATE,
            {"current_status": getattr(current_status, "value", current_status)},
            409,
        )


class AmountExceedsAvailableError(BaseAppException):
    """Requested amount is larger than what remains to be moved"""

    def __init__(
        self,
        requested: Decimal,
        available: Decimal,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.AMOUNT_EXCEEDS_AVAILABLE,
    ):
        super().__init__(
            message or f"Amount {requested} exceeds available amount {available}",
            error_code,
            {"requested": str(requested), "available": str(available)},
            422,
        )


class ExceedsRemainingBalanceError(AmountExceedsAvailableError):
    """Payment larger than the reservation's remaining balance"""

    def __init__(self, requested: Decimal, remaining_balance: Decimal):
        super().__init__(
            requested,
            remaining_balance,
            message=f"Payment amount {requested} exceeds remaining balance {remaining_balance}",
            error_code=ErrorCode.EXCEEDS_REMAINING_BALANCE,
        )


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "DuplicateResourceError",
    "RepositoryError",
    "AuthenticationError",
    "PermissionDeniedError",
    "TenantInactiveError",
    "InvalidDateRangeError",
    "CapacityExceededError",
    "RoomConflictError",
    "InvalidStateTransitionError",
    "InvalidPaymentStateError",
    "AmountExceedsAvailableError",
    "ExceedsRemainingBalanceError",
]
