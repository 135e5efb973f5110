"""
Students router for profile reads and management.
"""
from fastapi import APIRouter, HTTPException, Query, Response, status

from student_service.core.exceptions import (
    PermissionDeniedException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from student_service.dependencies.auth import CurrentStudent, ServicesDep
from student_service.schemas.student import StudentList, StudentResponse, StudentUpdate
from student_service.services.student_service import MAX_PAGE_SIZE

router = APIRouter(prefix="/students", tags=["Students"])


@router.get(
    "",
    response_model=StudentList,
    summary="List students",
)
async def list_students(
    current_student: CurrentStudent,
    services: ServicesDep,
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    """
    List registered students, ordered by ID.

    Requires `Authorization: Bearer <token>`.
    """
    return await services.students.list(limit=limit, offset=offset)


@router.get(
    "/me",
    response_model=StudentResponse,
    summary="Get current student",
)
async def get_me(current_student: CurrentStudent):
    """Get the profile of the authenticated student."""
    return current_student


@router.get(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Get student",
)
async def get_student(
    student_id: int,
    current_student: CurrentStudent,
    services: ServicesDep,
):
    """Get a student profile by ID."""
    try:
        return await services.students.get(student_id)
    except ResourceNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )


@router.put(
    "/{student_id}",
    response_model=StudentResponse,
    summary="Update student",
)
async def update_student(
    student_id: int,
    body: StudentUpdate,
    current_student: CurrentStudent,
    services: ServicesDep,
):
    """
    Update a student profile.

    - **first_name**, **last_name**, **email**: omitted fields are kept

    Students may only update their own profile.
    """
    try:
        return await services.students.update(current_student.id, student_id, body)
    except PermissionDeniedException as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except ResourceNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ResourceAlreadyExistsException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete student",
)
async def delete_student(
    student_id: int,
    current_student: CurrentStudent,
    services: ServicesDep,
):
    """Delete a student account. Students may only delete their own account."""
    try:
        await services.students.delete(current_student.id, student_id)
    except PermissionDeniedException as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except ResourceNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
