"""
API v1 router: aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from innkeeper.api.v1 import payments, reservations, rooms

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(reservations.router)
router.include_router(payments.router)
router.include_router(rooms.router)
