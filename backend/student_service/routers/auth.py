"""
Authentication router for sign-up, sign-in, and token refresh.
"""
from fastapi import APIRouter, HTTPException, status

from student_service.core.exceptions import (
    AuthenticationException,
    ResourceAlreadyExistsException,
)
from student_service.dependencies.auth import ServicesDep
from student_service.schemas.auth import (
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    Tokens,
)
from student_service.schemas.student import StudentResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/sign-up",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new student",
)
async def sign_up(body: SignUpRequest, services: ServicesDep):
    """
    Register a new student account.

    - **email**: Valid email address (must be unique)
    - **password**: Password (8 to 72 characters)
    """
    try:
        return await services.auth.sign_up(body)
    except ResourceAlreadyExistsException as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message,
        )


@router.post(
    "/sign-in",
    response_model=Tokens,
    summary="Login and get tokens",
)
async def sign_in(body: SignInRequest, services: ServicesDep):
    """
    Authenticate with email and password to receive an access/refresh token pair.

    Pass the access token as `Authorization: Bearer <token>` to protected endpoints.
    """
    try:
        return await services.auth.sign_in(body)
    except AuthenticationException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post(
    "/refresh",
    response_model=Tokens,
    summary="Refresh tokens",
)
async def refresh(body: RefreshRequest, services: ServicesDep):
    """
    Exchange a refresh token for a new token pair.

    The refresh token is single use: the response carries its replacement.
    """
    try:
        return await services.auth.refresh(body.refresh_token)
    except AuthenticationException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
