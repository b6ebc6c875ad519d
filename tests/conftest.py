"""Shared test fixtures."""

import os

# Settings require a secret at import time; tests never see a real one.
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from tests.fakes import FakeSession, Services, build_services


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def services() -> Services:
    return build_services()
