"""
Core middleware registration for the FastAPI application.

Request ids and request timing; both feed the logging context.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from innkeeper.core.logging import get_access_logger, request_id as request_id_var

access_logger = get_access_logger()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique request ID to each incoming request.

    The id is stored in request.state.request_id, bound to the logging
    context and echoed back in the X-Request-ID response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = req_id
        token = request_id_var.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Measures request processing time and logs completion."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        access_logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
        )
        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares. Starlette runs the last added one first,
    so the request id is assigned before timing starts.
    """
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
