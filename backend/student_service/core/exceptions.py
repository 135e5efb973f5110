"""
Application exceptions.

Every error raised by the service's own layers derives from
ApplicationException so callers at the boundaries (HTTP routers, the
lifecycle controller) can map them to a response or an exit status.
"""
from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ==================== Startup / infrastructure ====================


class ConfigurationException(ApplicationException):
    """Configuration could not be loaded or is invalid."""


class DatabaseConnectionException(ApplicationException):
    """Database could not be opened or reached."""


class TokenManagerException(ApplicationException):
    """Token manager could not be constructed."""


class ServerRuntimeException(ApplicationException):
    """HTTP server stopped serving without being asked to."""


class ShutdownTimeoutException(ApplicationException):
    """HTTP server did not stop before the shutdown deadline."""

    def __init__(self, timeout: float, details: Optional[dict] = None):
        self.timeout = timeout
        super().__init__(
            f"server did not stop within {timeout:g}s",
            details or {"timeout": timeout},
        )


# ==================== Data access ====================


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[object] = None,
        details: Optional[dict] = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id is not None:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ResourceAlreadyExistsException(ApplicationException):
    """Exception when a unique field is already taken."""

    def __init__(self, resource_type: str, field: str, details: Optional[dict] = None):
        self.resource_type = resource_type
        self.field = field
        super().__init__(f"{resource_type} with this {field} already exists", details)


# ==================== Access control ====================


class AuthenticationException(ApplicationException):
    """Credentials or token are invalid."""


class PermissionDeniedException(ApplicationException):
    """Authenticated caller may not perform the operation."""
