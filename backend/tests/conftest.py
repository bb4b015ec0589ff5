"""Pytest configuration and shared fixtures.

This module provides centralized test fixtures for:
- A per-test SQLite database file
- Database sessions for repository/service tests
- HTTP client for API testing
- Common patient payloads
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from patientmock.database import Database, get_db
from patientmock.main import app

TEST_USER = "test-user"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def database(tmp_path):
    """Connected Database on a fresh SQLite file, disposed after the test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'patients.db'}")
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """Session on the test database, rolled back on completion."""
    async with database.session() as session:
        yield session
        await session.rollback()


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(database):
    """Async test client for the app with the test database.

    Overrides the app's get_db dependency so API tests share the
    database used by the other fixtures.
    """

    async def override_get_db():
        async with database.session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def user_headers() -> dict[str, str]:
    """Identity header recorded as createdBy/updatedBy."""
    return {"X-User": TEST_USER}


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def admin_payload() -> dict:
    """Create body accepted by the admin (flat) API."""
    return {
        "firstName": "Test",
        "lastName": "Patient",
        "insurance": {"providerName": "MockIns", "policyNumber": "P123"},
    }


@pytest.fixture
def v1_payload() -> dict:
    """Create body accepted by the v1 (list-item) API."""
    return {
        "patientId": "10000001",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "dateOfBirth": "1970-01-01",
        "team": "Red Team",
        "payer": {
            "payerTypeName": "Commercial",
            "planName": "Blue Cross - PPO",
            "planId": "BC-1",
            "groupNumber": "G-9",
        },
        "lastOrder": {"orderNumber": "555", "status": "Shipped", "orderDate": "2024-02-03"},
    }


@pytest.fixture
def legacy_payload() -> dict:
    """Create body accepted by the legacy API."""
    return {
        "patientId": "LEG-1",
        "firstName": "Grace",
        "lastName": "Hopper",
        "teamName": "Blue Team",
        "dateOfBirth": "1906-12-09",
    }
