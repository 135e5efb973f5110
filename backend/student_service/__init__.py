"""
Student Service - CRUD backend for student accounts.
"""
__version__ = "0.1.0"
