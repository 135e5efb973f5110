"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from student_service.core.exceptions import AuthenticationException
from student_service.core.security import TokenManager
from student_service.models.student import StudentModel
from student_service.services import Services

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")


def get_services(request: Request) -> Services:
    """Dependency returning the services wired into the application."""
    return request.app.state.services


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


async def get_current_student(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
    services: Annotated[Services, Depends(get_services)],
) -> StudentModel:
    """
    Dependency to get the current authenticated student from the bearer token.

    Token is passed as header: Authorization: Bearer xxx

    Raises:
        HTTPException 401: If token is missing, invalid or expired
        HTTPException 401: If the student no longer exists
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        student_id = int(token_manager.parse(credentials.credentials))
    except (AuthenticationException, ValueError):
        raise credentials_exception

    student = await services.storage.students.get_by_id(student_id)
    if student is None:
        raise credentials_exception

    return student


# Type aliases for cleaner route signatures
CurrentStudent = Annotated[StudentModel, Depends(get_current_student)]
ServicesDep = Annotated[Services, Depends(get_services)]
