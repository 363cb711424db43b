"""API test fixtures — ASGI client against the in-memory database.

Invariants:
    - The process-wide db_manager points at the per-test database and is
      restored afterwards
    - sign_up() returns ready-to-use Authorization headers
"""

import pytest
from httpx import ASGITransport, AsyncClient

import jobtracker.infrastructure.database as database
from jobtracker.main import app


@pytest.fixture
async def client(db_manager):
    previous = database.db_manager
    database.db_manager = db_manager
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    database.db_manager = previous


@pytest.fixture
def sign_up(client):
    """Create an account through the API and return bearer headers."""
    async def _sign_up(email: str, password: str = "hunter22") -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/sign-up", json={"email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _sign_up


@pytest.fixture
async def alice_headers(sign_up):
    return await sign_up("alice@example.com")


@pytest.fixture
async def bob_headers(sign_up):
    return await sign_up("bob@example.com")
