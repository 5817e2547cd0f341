from innkeeper.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from innkeeper.schemas.common.response import (
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    SuccessResponse,
)

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "SuccessResponse",
    "PaginationMeta",
    "PaginatedResponse",
    "MessageResponse",
]
