"""
API Routers module.
"""
from student_service.routers import auth, health, students

__all__ = ["auth", "health", "students"]
