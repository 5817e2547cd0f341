"""
Base service class providing common functionality for all services.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings, get_settings
from innkeeper.core.exceptions import BaseAppException, ErrorCode
from innkeeper.core.logging import get_logger
from innkeeper.services.base.service_result import ErrorSeverity, ServiceError, ServiceResult


class BaseService(ABC):
    """
    Base service with common behaviors:
    - Shared logger, db session and tenant scope
    - Consistent error handling via ServiceResult
    - Transaction and savepoint utilities
    """

    def __init__(self, db_session: Session, tenant_id: UUID, settings: Optional[Settings] = None):
        """
        Args:
            db_session: SQLAlchemy database session
            tenant_id: Tenant every repository of this service is bound to
            settings: Business-rule settings; defaults to the process settings
        """
        self.db: Session = db_session
        self.tenant_id = tenant_id
        self.settings: Settings = settings or get_settings()
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert an exception to a ServiceResult failure.

        Domain exceptions are business-rule rejections and keep their own
        code and details; anything else is an internal fault.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
            "tenant": str(self.tenant_id),
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            self._logger.warning(f"{operation} rejected: {exception.message}", extra=context)
            return ServiceResult.from_app_exception(exception)

        self._logger.error(f"Error during {operation}: {exception}", exc_info=True, extra=context)
        code = ErrorCode.DATABASE_ERROR if isinstance(exception, SQLAlchemyError) else ErrorCode.INTERNAL_ERROR
        return ServiceResult.failure(
            ServiceError(
                code=code,
                message=f"Failed to {operation}",
                severity=ErrorSeverity.CRITICAL,
                details={"error": str(exception), "entity_ref": context["entity_ref"]},
            )
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self):
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.reservations.add(reservation)
                # commit on success, rollback on exception
        """
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, logging rollback errors."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            self._logger.warning(f"Rollback failed: {e}")

    def _run_side_effect(self, name: str, reservation_id: Any, action: Callable[[], None]) -> bool:
        """
        Run a best-effort follow-up inside a savepoint.

        A failure rolls back only the savepoint and is logged for operators
        to reconcile; the enclosing state change is kept.
        """
        try:
            with self.db.begin_nested():
                action()
            return True
        except Exception as e:
            self._logger.error(
                f"Side effect '{name}' failed: {e}",
                exc_info=True,
                extra={
                    "side_effect": name,
                    "reservation_id": str(reservation_id),
                    "error_type": type(e).__name__,
                },
            )
            return False

    def _log_operation(self, operation: str, entity_ref: Optional[Any] = None, **extra: Any) -> None:
        context = {"entity_ref": str(entity_ref) if entity_ref is not None else None, "tenant": str(self.tenant_id)}
        context.update(extra)
        self._logger.info(operation, extra=context)
