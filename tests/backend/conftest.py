"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for testing
routes and the lifecycle controller.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def signed_in_tokens():
    """
    Sign a student in through the API and return the token pair.

    Usage:
        tokens = await signed_in_tokens(async_client, student_data)
    """
    async def _sign_in(client, data: dict) -> dict:
        response = await client.post(
            "/api/v1/auth/sign-in",
            json={"email": data["email"], "password": data["password"]},
        )
        assert response.status_code == 200, response.text
        return response.json()
    return _sign_in


@pytest.fixture
def bearer():
    """Turn an access token into request headers."""
    def _bearer(access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}
    return _bearer


# =============================================================================
# Lifecycle Fixtures
# =============================================================================

@pytest.fixture
def idle_server():
    """
    A stand-in for Server whose run() blocks until stop() is called.

    `stop_side_effect` can be set to make stop() raise.
    """
    import asyncio

    server = MagicMock()
    stopped = asyncio.Event()

    async def _run():
        await stopped.wait()

    async def _stop(timeout):
        if server.stop_side_effect is not None:
            raise server.stop_side_effect
        stopped.set()

    server.stop_side_effect = None
    server.run = AsyncMock(side_effect=_run)
    server.stop = AsyncMock(side_effect=_stop)
    server.started = True
    return server


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
