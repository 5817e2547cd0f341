"""
Exception handlers translating application errors into JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from innkeeper.core.exceptions import BaseAppException, ErrorCode
from innkeeper.core.logging import get_logger

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"Unhandled application error: {exc}",
            extra={"path": request.url.path, "error_code": exc.error_code.value},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, **jsonable_encoder(exc.to_dict())},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "message": "Request validation failed",
                "code": ErrorCode.VALIDATION_ERROR.value,
                "details": {"errors": jsonable_encoder(exc.errors(), custom_encoder={ValueError: str})},
                "type": "RequestValidationError",
            },
        },
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "message": "Database operation failed",
                "code": ErrorCode.DATABASE_ERROR.value,
                "details": {},
                "type": type(exc).__name__,
            },
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
