"""
Storage layer - data access on top of the database engine.
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from student_service.core.exceptions import RepositoryException
from student_service.models import Base
from student_service.storage.students import StudentRepository


class Storage:
    """Groups the repositories sharing one database engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessions = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,  # models stay readable after commit
        )
        self.students = StudentRepository(self._sessions)

    async def create_schema(self) -> None:
        """
        Create missing tables.

        Raises:
            RepositoryException: If the DDL fails
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryException(f"can't create schema: {e}") from e


__all__ = ["Storage", "StudentRepository"]
