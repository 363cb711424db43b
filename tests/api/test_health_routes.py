"""Health routes — liveness and readiness probes."""

import jobtracker.infrastructure.database as database


async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
