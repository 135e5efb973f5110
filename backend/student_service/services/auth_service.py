"""
Authentication service for student registration, login and token refresh.
"""
import logging
from datetime import datetime, timedelta, timezone

from student_service.config import Settings
from student_service.core.exceptions import (
    AuthenticationException,
    ResourceAlreadyExistsException,
)
from student_service.core.security import TokenManager, hash_password, verify_password
from student_service.models.student import StudentModel
from student_service.schemas.auth import SignInRequest, SignUpRequest, Tokens
from student_service.storage.students import StudentRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        students: StudentRepository,
        token_manager: TokenManager,
        settings: Settings,
    ):
        self.students = students
        self.token_manager = token_manager
        self.access_ttl = timedelta(minutes=settings.jwt.access_token_ttl_minutes)
        self.refresh_ttl = timedelta(minutes=settings.jwt.refresh_token_ttl_minutes)

    async def sign_up(self, request: SignUpRequest) -> StudentModel:
        """
        Register a new student.

        Args:
            request: Registration request

        Returns:
            The created student

        Raises:
            ResourceAlreadyExistsException: If the email is already registered
        """
        email = request.email.lower()
        if await self.students.get_by_email(email) is not None:
            raise ResourceAlreadyExistsException("Student", "email")

        student = await self.students.create(
            first_name=request.first_name,
            last_name=request.last_name,
            email=email,
            password_hash=hash_password(request.password),
        )
        logger.info("Student %s registered", student.id)
        return student

    async def sign_in(self, request: SignInRequest) -> Tokens:
        """
        Authenticate a student and open a new session.

        Raises:
            AuthenticationException: If credentials are invalid
        """
        student = await self.students.get_by_email(request.email.lower())
        if student is None or not verify_password(request.password, student.password_hash):
            raise AuthenticationException("invalid email or password")

        return await self._create_session(student.id)

    async def refresh(self, refresh_token: str) -> Tokens:
        """
        Exchange a refresh token for a new token pair.

        The old refresh token is replaced and can't be used again, also
        when the same token is presented by concurrent requests.

        Raises:
            AuthenticationException: If the token is unknown, expired or already used
        """
        now = datetime.now(timezone.utc)
        new_refresh_token = self.token_manager.new_refresh_token()

        student_id = await self.students.rotate_session(
            refresh_token,
            new_refresh_token,
            now + self.refresh_ttl,
            now,
        )
        if student_id is None:
            raise AuthenticationException("invalid or expired refresh token")

        return self._tokens(student_id, new_refresh_token)

    async def _create_session(self, student_id: int) -> Tokens:
        refresh_token = self.token_manager.new_refresh_token()

        await self.students.set_session(
            student_id,
            refresh_token,
            datetime.now(timezone.utc) + self.refresh_ttl,
        )

        return self._tokens(student_id, refresh_token)

    def _tokens(self, student_id: int, refresh_token: str) -> Tokens:
        return Tokens(
            access_token=self.token_manager.new_jwt(str(student_id), self.access_ttl),
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=int(self.access_ttl.total_seconds()),
        )
