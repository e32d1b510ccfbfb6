"""Shared API schemas."""

from smartdns_web.core.schemas.problem_details import (
    FieldError,
    ProblemDetails,
    ValidationProblemDetails,
)
from smartdns_web.core.schemas.table import MessageResponse, TableColumn, TableResponse

__all__ = [
    "FieldError",
    "MessageResponse",
    "ProblemDetails",
    "TableColumn",
    "TableResponse",
    "ValidationProblemDetails",
]
