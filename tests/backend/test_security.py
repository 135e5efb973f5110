"""
Tests for password hashing and the token manager.
"""

from datetime import timedelta

import pytest

from student_service.core.exceptions import AuthenticationException, TokenManagerException
from student_service.core.security import TokenManager, hash_password, verify_password


# =============================================================================
# Password Hashing Tests
# =============================================================================

class TestPasswordHashing:
    """Tests for password hashing functions in student_service.core.security."""

    def test_hash_password_returns_bcrypt_hash(self):
        """hash_password should return bcrypt hash."""
        password = "TestPassword123!"
        hashed = hash_password(password)

        # bcrypt hashes start with $2b$
        assert hashed.startswith("$2b$")
        assert hashed != password

    def test_verify_password_correct_returns_true(self):
        password = "TestPassword123!"
        hashed = hash_password(password)

        assert verify_password(password, hashed) is True

    def test_verify_password_wrong_returns_false(self):
        hashed = hash_password("TestPassword123!")

        assert verify_password("WrongPassword123!", hashed) is False

    def test_hash_password_different_each_time(self):
        """Same password should produce different hashes due to salt."""
        password = "TestPassword123!"

        assert hash_password(password) != hash_password(password)


# =============================================================================
# TokenManager Tests
# =============================================================================

class TestTokenManager:
    """Tests for TokenManager."""

    def test_empty_signing_key_rejected(self):
        with pytest.raises(TokenManagerException, match="empty signing key"):
            TokenManager("")

    def test_parse_returns_subject(self):
        manager = TokenManager("secret")
        token = manager.new_jwt("42", timedelta(minutes=5))

        assert manager.parse(token) == "42"

    def test_token_carries_expiry_and_issued_at(self):
        manager = TokenManager("secret")
        payload = manager.decode(manager.new_jwt("42", timedelta(minutes=5)))

        assert payload["exp"] - payload["iat"] == 300

    def test_expired_token_rejected(self):
        manager = TokenManager("secret")
        token = manager.new_jwt("42", timedelta(seconds=-1))

        with pytest.raises(AuthenticationException):
            manager.parse(token)

    def test_token_signed_with_other_key_rejected(self):
        token = TokenManager("other-secret").new_jwt("42", timedelta(minutes=5))

        with pytest.raises(AuthenticationException):
            TokenManager("secret").parse(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(AuthenticationException):
            TokenManager("secret").parse("not-a-jwt")

    def test_refresh_tokens_are_random_hex(self):
        manager = TokenManager("secret")

        first = manager.new_refresh_token()
        second = manager.new_refresh_token()

        assert len(first) == 64
        int(first, 16)
        assert first != second
