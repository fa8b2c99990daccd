"""Shared fixtures for service tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import httpx
import pytest

from src.config import Settings

TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://project.supabase.co/",
        supabase_anon_key="anon-key",
        supabase_service_role_key="service-key",
        supabase_jwt_secret="jwt-secret-for-tests-only-0123456789",
        supabase_db_url="postgresql://localhost/flowtrack_test",
    )


def make_response(status_code: int, payload: object) -> httpx.Response:
    request = httpx.Request("GET", "https://project.supabase.co/rest/v1/profiles")
    return httpx.Response(status_code, json=payload, request=request)


@pytest.fixture
def mock_httpx_client() -> MagicMock:
    """Mock httpx.AsyncClient answering every request with an empty row list."""
    client = MagicMock()
    client.request = AsyncMock(return_value=make_response(200, []))
    return client
