"""Error handling module with RFC 7807 Problem Details."""

from sekolah.core.errors.exceptions import (
    AppException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from sekolah.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "ConflictError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "PermissionDeniedError",
    "ProblemDetail",
    "UnauthorizedError",
    "register_exception_handlers",
]
