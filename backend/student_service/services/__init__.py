"""
Service layer for business logic.
"""
from student_service.config import Settings
from student_service.core.security import TokenManager
from student_service.services.auth_service import AuthService
from student_service.services.student_service import StudentService
from student_service.storage import Storage


class Services:
    """Business services built on one storage and token manager."""

    def __init__(self, storage: Storage, token_manager: TokenManager, settings: Settings):
        self.storage = storage
        self.auth = AuthService(storage.students, token_manager, settings)
        self.students = StudentService(storage.students)


__all__ = [
    "AuthService",
    "Services",
    "StudentService",
]
