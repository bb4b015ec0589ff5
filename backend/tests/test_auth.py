"""Tests for caller identity resolution."""

import pytest

from patientmock.auth import get_identity
from patientmock.config import settings


@pytest.mark.asyncio
async def test_x_user_header_wins():
    assert await get_identity(x_user=" nurse-1 ", credentials=None) == "nurse-1"


@pytest.mark.asyncio
async def test_blank_header_uses_default(monkeypatch):
    monkeypatch.setattr(settings, "default_identity", "mock-system")
    assert await get_identity(x_user="  ", credentials=None) == "mock-system"


@pytest.mark.asyncio
async def test_bearer_token_is_not_checked(client):
    response = await client.post(
        "/api/v1/admin/patients",
        json={"firstName": "A", "lastName": "B", "insurance": {"providerName": "X"}},
        headers={"Authorization": "Bearer anything", "X-User": "token-user"},
    )
    assert response.status_code == 201
    assert response.json()["metadata"]["createdBy"] == "token-user"
