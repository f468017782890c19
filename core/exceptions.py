"""Custom exception classes for the marketplace.

Domain services raise these; the handlers in `core.error_handlers` turn
them into JSON error responses.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a referenced listing, order or profile does not exist."""

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Listing', 'Order').
            identifier: ID that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(AppException):
    """Raised when an action is rejected by a business rule or bad input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Raised when a protected request carries no identity."""

    def __init__(self, message: str = "Authentication required", redirect_to: str = "/login"):
        super().__init__(message, status_code=401, details={"redirect_to": redirect_to})


class ForbiddenError(AppException):
    """Raised when the caller's role may not perform an action."""

    def __init__(self, message: str, redirect_to: Optional[str] = None):
        details = {"redirect_to": redirect_to} if redirect_to else {}
        super().__init__(message, status_code=403, details=details)


class ConflictError(AppException):
    """Raised when a write conflicts with state that may not change."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class RoleAlreadyAssignedError(ConflictError):
    """Raised when a different role is requested for a user who already has one."""

    def __init__(self, user_id: str, current_role: str):
        super().__init__(
            "Role already set for this user and cannot be changed",
            details={"user_id": user_id, "role": current_role},
        )


class UpstreamServiceError(AppException):
    """Raised when an external API (mapping, geocoding) fails."""

    def __init__(self, message: str, service: Optional[str] = None):
        details = {"service": service} if service else {}
        super().__init__(message, status_code=502, details=details)


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, status_code=500, details=details)


class ConfigurationError(AppException):
    """Exception raised when application configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        """Initialize configuration error.

        Args:
            message: Configuration error message.
            config_key: Optional configuration key that is invalid.
        """
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, status_code=500, details=details)
