"""
Security utilities for password hashing and JWT token management.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from student_service.core.exceptions import (
    AuthenticationException,
    TokenManagerException,
)

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

REFRESH_TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


class TokenManager:
    """Issues and validates signed access tokens and opaque refresh tokens."""

    def __init__(self, signing_key: str, algorithm: str = "HS256"):
        """
        Args:
            signing_key: HMAC secret used to sign access tokens
            algorithm: JWS algorithm name

        Raises:
            TokenManagerException: If the signing key is empty
        """
        if not signing_key:
            raise TokenManagerException("empty signing key")
        self._signing_key = signing_key
        self.algorithm = algorithm

    def new_jwt(self, subject: str, ttl: timedelta) -> str:
        """
        Create a signed access token.

        Args:
            subject: Token subject (student ID)
            ttl: Lifetime of the token

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self._signing_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a JWT token.

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, self._signing_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthenticationException(f"invalid token: {e}") from e

    def parse(self, token: str) -> str:
        """
        Validate a token and return its subject.

        Raises:
            AuthenticationException: If the token is invalid, expired or has no subject
        """
        subject = self.decode(token).get("sub")
        if not subject:
            raise AuthenticationException("token has no subject")
        return subject

    def new_refresh_token(self) -> str:
        """Generate a random opaque refresh token."""
        return secrets.token_hex(REFRESH_TOKEN_BYTES)
