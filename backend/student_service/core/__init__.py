"""
Core module - Security, exceptions, and logging utilities.
"""
from student_service.core.exceptions import (
    ApplicationException,
    AuthenticationException,
    ConfigurationException,
    DatabaseConnectionException,
    PermissionDeniedException,
    RepositoryException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ServerRuntimeException,
    ShutdownTimeoutException,
    TokenManagerException,
)
from student_service.core.security import (
    TokenManager,
    hash_password,
    verify_password,
)

__all__ = [
    "ApplicationException",
    "AuthenticationException",
    "ConfigurationException",
    "DatabaseConnectionException",
    "PermissionDeniedException",
    "RepositoryException",
    "ResourceAlreadyExistsException",
    "ResourceNotFoundException",
    "ServerRuntimeException",
    "ShutdownTimeoutException",
    "TokenManagerException",
    "TokenManager",
    "hash_password",
    "verify_password",
]
