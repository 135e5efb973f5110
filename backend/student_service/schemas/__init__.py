"""
Request and response schemas for API endpoints.
"""
from student_service.schemas.auth import (
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    Tokens,
)
from student_service.schemas.student import (
    StudentList,
    StudentResponse,
    StudentUpdate,
)

__all__ = [
    # Auth
    "RefreshRequest",
    "SignInRequest",
    "SignUpRequest",
    "Tokens",
    # Students
    "StudentList",
    "StudentResponse",
    "StudentUpdate",
]
