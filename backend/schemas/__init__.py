"""Pydantic schemas for API responses."""

from backend.schemas.error import (  # noqa: F401
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from backend.schemas.fighter import (  # noqa: F401
    FighterCreate,
    FighterResponse,
    FighterUpdate,
    MessageResponse,
    PaginatedFightersResponse,
    Pagination,
)
