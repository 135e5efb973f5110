"""
Database module - relational database connections.
"""
from student_service.database.connections import (
    build_url,
    close_database,
    connect_database,
    ping,
)

__all__ = [
    "build_url",
    "close_database",
    "connect_database",
    "ping",
]
