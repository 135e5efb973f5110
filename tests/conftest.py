"""
Global test fixtures for Student Service.

This module provides shared fixtures for all tests including:
- Settings and dotenv files pointing at a temporary SQLite database
- Connected engine, storage, token manager and services
- FastAPI app and async HTTP client
- Registered student and auth header helpers
"""

import asyncio
import sys
from pathlib import Path
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from student_service.config import DatabaseSettings, JWTSettings, ServerSettings, Settings  # noqa: E402

TEST_SIGNING_KEY = "test-signing-key"


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def sqlite_dsn(tmp_path) -> str:
    """DSN of a fresh SQLite database file."""
    return f"sqlite:///{tmp_path / 'students.db'}"


@pytest.fixture
def settings(sqlite_dsn) -> Settings:
    """Settings built in code, ignoring any .env file."""
    return Settings(
        _env_file=None,
        database=DatabaseSettings(driver="sqlite+aiosqlite", dsn=sqlite_dsn),
        jwt=JWTSettings(signing_key=TEST_SIGNING_KEY),
        server=ServerSettings(host="127.0.0.1", port=0),
    )


@pytest.fixture
def write_env_file(tmp_path) -> Callable[..., Path]:
    """
    Factory writing a dotenv file.

    Usage:
        path = write_env_file(DATABASE__DSN="sqlite:///x.db")
    """
    def _write(**values: str) -> Path:
        path = tmp_path / ".env"
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
        return path
    return _write


@pytest.fixture
def env_file(write_env_file, sqlite_dsn) -> Path:
    """A complete, valid dotenv file for the service."""
    return write_env_file(
        DATABASE__DRIVER="sqlite+aiosqlite",
        DATABASE__DSN=sqlite_dsn,
        JWT__SIGNING_KEY=TEST_SIGNING_KEY,
        SERVER__HOST="127.0.0.1",
        SERVER__PORT="0",
        LOG_LEVEL="INFO",
    )


# =============================================================================
# Database / Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def engine(settings) -> AsyncGenerator:
    """Connected async engine on the temporary SQLite database."""
    from student_service.database.connections import connect_database

    engine = await connect_database(settings.database.driver, settings.database.dsn)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def storage(engine):
    """Storage with the schema created."""
    from student_service.storage import Storage

    storage = Storage(engine)
    await storage.create_schema()
    return storage


@pytest.fixture
def token_manager():
    from student_service.core.security import TokenManager

    return TokenManager(TEST_SIGNING_KEY)


@pytest.fixture
def services(storage, token_manager, settings):
    from student_service.services import Services

    return Services(storage, token_manager, settings)


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app(services, token_manager, settings):
    """FastAPI app wired to the test services."""
    from student_service.handler import Handler

    return Handler(services, token_manager).init(settings)


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Runs on the test's event loop, the same one the engine's connections use.
    """
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


# =============================================================================
# Student Fixtures
# =============================================================================

@pytest.fixture
def student_data() -> dict:
    """Basic student data for registration."""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "SecurePassword123!",
    }


@pytest.fixture
def other_student_data() -> dict:
    return {
        "first_name": "Alan",
        "last_name": "Turing",
        "email": "alan@example.com",
        "password": "AnotherPassword123!",
    }


@pytest_asyncio.fixture
async def registered_student(services, student_data):
    """A student already stored in the database."""
    from student_service.schemas.auth import SignUpRequest

    return await services.auth.sign_up(SignUpRequest(**student_data))


@pytest.fixture
def auth_headers(token_manager) -> Callable[[int], dict]:
    """
    Build an Authorization header for a student ID.

    Usage:
        response = await async_client.get("/api/v1/students/me", headers=auth_headers(1))
    """
    from datetime import timedelta

    def _headers(student_id: int) -> dict:
        token = token_manager.new_jwt(str(student_id), timedelta(minutes=5))
        return {"Authorization": f"Bearer {token}"}
    return _headers


# =============================================================================
# Utility Fixtures
# =============================================================================

@pytest.fixture
def wait_until():
    """
    Helper polling a condition on the running event loop.

    Usage:
        await wait_until(lambda: server.started, timeout=5)
    """
    async def _wait(condition: Callable[[], bool], timeout: float = 10.0, interval: float = 0.02):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not condition():
            if loop.time() > deadline:
                raise AssertionError(f"condition not met within {timeout}s")
            await asyncio.sleep(interval)
    return _wait
