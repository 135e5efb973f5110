"""
Dependencies for dependency injection in routes.
"""
from student_service.dependencies.auth import (
    CurrentStudent,
    ServicesDep,
    get_current_student,
    get_services,
    get_token_manager,
)

__all__ = [
    "CurrentStudent",
    "ServicesDep",
    "get_current_student",
    "get_services",
    "get_token_manager",
]
