"""
Student repository.

Data access for the students table. Each call runs in its own
transaction; returned models are detached but fully loaded.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from student_service.core.exceptions import (
    RepositoryException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from student_service.models.student import StudentModel

UPDATABLE_FIELDS = frozenset({"first_name", "last_name", "email"})


class StudentRepository:
    """SQLAlchemy implementation of student persistence."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        async with self._sessions() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError:
                raise
            except SQLAlchemyError as e:
                raise RepositoryException(f"database error: {e}") from e

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> StudentModel:
        """
        Insert a new student.

        Raises:
            ResourceAlreadyExistsException: If the email is taken
        """
        model = StudentModel(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
        )
        try:
            async with self._transaction() as session:
                session.add(model)
        except IntegrityError as e:
            raise ResourceAlreadyExistsException("Student", "email") from e
        return model

    async def get_by_id(self, student_id: int) -> Optional[StudentModel]:
        """Get student by ID."""
        async with self._transaction() as session:
            return await session.get(StudentModel, student_id)

    async def get_by_email(self, email: str) -> Optional[StudentModel]:
        """Get student by email."""
        async with self._transaction() as session:
            result = await session.execute(
                select(StudentModel).where(StudentModel.email == email)
            )
            return result.scalar_one_or_none()

    async def get_by_refresh_token(self, refresh_token: str, now: datetime) -> Optional[StudentModel]:
        """Get the student owning an unexpired refresh token."""
        async with self._transaction() as session:
            result = await session.execute(
                select(StudentModel).where(
                    StudentModel.refresh_token == refresh_token,
                    StudentModel.refresh_expires_at > now,
                )
            )
            return result.scalar_one_or_none()

    async def list(self, limit: int = 50, offset: int = 0) -> list[StudentModel]:
        """List students ordered by ID."""
        async with self._transaction() as session:
            result = await session.execute(
                select(StudentModel)
                .order_by(StudentModel.id)
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars().all())

    async def count(self) -> int:
        async with self._transaction() as session:
            result = await session.execute(select(func.count(StudentModel.id)))
            return result.scalar_one()

    async def update(self, student_id: int, fields: dict[str, Any]) -> StudentModel:
        """
        Update profile fields of a student.

        Raises:
            ResourceNotFoundException: If no such student
            ResourceAlreadyExistsException: If the new email is taken
            RepositoryException: If a field is not updatable
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise RepositoryException(f"fields cannot be updated: {sorted(unknown)}")

        try:
            async with self._transaction() as session:
                model = await session.get(StudentModel, student_id)
                if model is None:
                    raise ResourceNotFoundException("Student", student_id)
                for name, value in fields.items():
                    setattr(model, name, value)
        except IntegrityError as e:
            raise ResourceAlreadyExistsException("Student", "email") from e
        return model

    async def delete(self, student_id: int) -> None:
        """
        Delete a student.

        Raises:
            ResourceNotFoundException: If no such student
        """
        async with self._transaction() as session:
            model = await session.get(StudentModel, student_id)
            if model is None:
                raise ResourceNotFoundException("Student", student_id)
            await session.delete(model)

    async def set_session(
        self,
        student_id: int,
        refresh_token: str,
        expires_at: datetime,
    ) -> None:
        """Store the student's current refresh token."""
        async with self._transaction() as session:
            result = await session.execute(
                update(StudentModel)
                .where(StudentModel.id == student_id)
                .values(refresh_token=refresh_token, refresh_expires_at=expires_at)
            )
            if result.rowcount == 0:
                raise ResourceNotFoundException("Student", student_id)

    async def rotate_session(
        self,
        refresh_token: str,
        new_refresh_token: str,
        expires_at: datetime,
        now: datetime,
    ) -> Optional[int]:
        """
        Replace an unexpired refresh token with a new one.

        Runs as a single conditional UPDATE, so of several concurrent
        rotations with the same token exactly one matches.

        Returns:
            ID of the student owning the token, None if it is unknown,
            expired or already rotated
        """
        async with self._transaction() as session:
            result = await session.execute(
                update(StudentModel)
                .where(
                    StudentModel.refresh_token == refresh_token,
                    StudentModel.refresh_expires_at > now,
                )
                .values(refresh_token=new_refresh_token, refresh_expires_at=expires_at)
                .returning(StudentModel.id)
                .execution_options(synchronize_session=False)
            )
            return result.scalar_one_or_none()
