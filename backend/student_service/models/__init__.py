"""
ORM models for database tables.
"""
from student_service.models.student import Base, StudentModel

__all__ = [
    "Base",
    "StudentModel",
]
