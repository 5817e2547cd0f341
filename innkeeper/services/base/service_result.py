"""
Service result type: services return outcomes instead of raising, and the
API layer decides how a failure is rendered.
"""

from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from innkeeper.core.exceptions import BaseAppException, ErrorCode


class ErrorSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    """A failed operation: stable code, message and structured details."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Dict[str, Any] = dataclass_field(default_factory=dict)
    field: Optional[str] = None


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Success carries `data`; failure carries `error`. `metadata` holds
    side information such as paging totals.
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = dataclass_field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[TData]":
        return cls(is_success=False, error=error, message=error.message)

    @classmethod
    def from_app_exception(
        cls,
        exception: BaseAppException,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> "ServiceResult[TData]":
        """Keep a domain exception's code and details on the failure."""
        return cls.failure(
            ServiceError(
                code=exception.error_code,
                message=exception.message,
                severity=severity,
                details=exception.details,
                field=exception.details.get("field"),
            )
        )

    @classmethod
    def not_found(cls, resource_type: str, resource_id: Optional[str] = None) -> "ServiceResult[TData]":
        message = f"{resource_type} not found"
        if resource_id:
            message += f" (ID: {resource_id})"
        return cls.failure(
            ServiceError(
                code=ErrorCode.NOT_FOUND,
                message=message,
                severity=ErrorSeverity.WARNING,
                details={"resource_type": resource_type, "resource_id": resource_id},
            )
        )

    def __bool__(self) -> bool:
        return self.is_success


__all__ = ["ErrorCode", "ErrorSeverity", "ServiceError", "ServiceResult"]
