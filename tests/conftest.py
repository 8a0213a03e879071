"""Pytest configuration and fixtures."""
import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from tests.mocks import make_db


@pytest.fixture
def auth_headers():
    """Bearer headers for a test user."""
    from app.utils.auth import create_access_token

    token = create_access_token(user_id="user123")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client whose database dependency is a mock.

    Yields (client, db); arrange behaviour through ``db.collections``.
    The lifespan is not run, so no MongoDB connection is made.
    """
    from app.database import get_database
    from app.main import app

    db = make_db()
    app.dependency_overrides[get_database] = lambda: db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client, db

    app.dependency_overrides.clear()
