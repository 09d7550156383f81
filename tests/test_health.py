"""Tests for the health and root endpoints."""

from httpx import AsyncClient


async def test_health(client: AsyncClient):
    """Health reports a reachable database."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_root(client: AsyncClient):
    """Root lists the API entry points."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "DemandMap"
    assert data["docs"] == "/docs"
