"""Error types for cursor pagination."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InvalidCursor,
    InvalidParams
)

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "InvalidCursor",
    "InvalidParams"
]
