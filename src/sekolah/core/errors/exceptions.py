"""Domain exceptions for the application.

These exceptions are raised by route guards, services and repositories
and converted to RFC 7807 Problem Details responses by the exception
handlers. The permission evaluator never raises; denials only become
exceptions at the request boundary.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested record does not exist.

    Example:
        raise NotFoundError("Rule not found", resource="role_permission", resource_id=str(rule_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a write collides with existing data.

    Example:
        raise ConflictError("Role already exists", details={"name": "GURU"})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class UnauthorizedError(AppException):
    """Raised when the bearer token is missing or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when the principal may not access a resource."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class PermissionDeniedError(ForbiddenError):
    """Raised by route guards when the evaluator denies access.

    Example:
        raise PermissionDeniedError(resource="nilai", action="update")
    """

    message = "You do not have permission to access this resource"
    error_code = "permission_denied"

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        action: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource is not None:
            details["resource"] = resource
        if action is not None:
            details["action"] = action
        super().__init__(message=message, details=details, **kwargs)
