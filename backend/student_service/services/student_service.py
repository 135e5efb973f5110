"""
Student profile service.
"""
from student_service.core.exceptions import (
    PermissionDeniedException,
    ResourceNotFoundException,
)
from student_service.models.student import StudentModel
from student_service.schemas.student import StudentList, StudentResponse, StudentUpdate
from student_service.storage.students import StudentRepository

MAX_PAGE_SIZE = 100


class StudentService:
    """Read and manage student profiles."""

    def __init__(self, students: StudentRepository):
        self.students = students

    async def get(self, student_id: int) -> StudentModel:
        """
        Get a student by ID.

        Raises:
            ResourceNotFoundException: If no such student
        """
        student = await self.students.get_by_id(student_id)
        if student is None:
            raise ResourceNotFoundException("Student", student_id)
        return student

    async def list(self, limit: int = 50, offset: int = 0) -> StudentList:
        """List students, `limit` capped at MAX_PAGE_SIZE."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        students = await self.students.list(limit=limit, offset=offset)
        total = await self.students.count()

        return StudentList(
            students=[StudentResponse.model_validate(s) for s in students],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def update(
        self,
        caller_id: int,
        student_id: int,
        body: StudentUpdate,
    ) -> StudentModel:
        """
        Update a student's profile. Students may only edit themselves.

        Raises:
            PermissionDeniedException: If caller is not the student
            ResourceNotFoundException: If no such student
            ResourceAlreadyExistsException: If the new email is taken
        """
        self._check_owner(caller_id, student_id)

        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in fields:
            fields["email"] = fields["email"].lower()
        if not fields:
            return await self.get(student_id)

        return await self.students.update(student_id, fields)

    async def delete(self, caller_id: int, student_id: int) -> None:
        """
        Delete a student account. Students may only delete themselves.

        Raises:
            PermissionDeniedException: If caller is not the student
            ResourceNotFoundException: If no such student
        """
        self._check_owner(caller_id, student_id)
        await self.students.delete(student_id)

    @staticmethod
    def _check_owner(caller_id: int, student_id: int) -> None:
        if caller_id != student_id:
            raise PermissionDeniedException("students can only modify their own account")
