"""Shared fixtures."""

import math
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import demandmap.models  # noqa: E402, F401
from demandmap.database import Base, get_db  # noqa: E402


class GridIndex:
    """Square-grid stand-in for H3 with predictable cell ids.

    Cells are "row:col" on a grid of `size` degrees; neighbors are the four
    edge-sharing squares. Cells listed in `broken` fail neighbor lookups and
    negative resolutions fail cell lookups.
    """

    def __init__(self, size: float = 0.01, broken: set[str] | None = None):
        self.size = size
        self.broken = broken or set()

    def cell_for(self, lat: float, lng: float, resolution: int) -> str | None:
        if resolution < 0 or not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        return f"{math.floor(lat / self.size)}:{math.floor(lng / self.size)}"

    def center_of(self, cell: str) -> tuple[float, float]:
        row, col = (int(part) for part in cell.split(":"))
        return (row + 0.5) * self.size, (col + 0.5) * self.size

    def ring_neighbors(self, cell: str) -> set[str] | None:
        if cell in self.broken:
            return None
        row, col = (int(part) for part in cell.split(":"))
        return {
            f"{row + 1}:{col}",
            f"{row - 1}:{col}",
            f"{row}:{col + 1}",
            f"{row}:{col - 1}",
        }


@pytest.fixture
def grid_index() -> GridIndex:
    """A fresh square-grid index."""
    return GridIndex()


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """A session bound to the in-memory engine."""
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine):
    """HTTP client for the app, backed by the in-memory database."""
    from demandmap.main import app

    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register (and, for the first user, log in) a user."""

    async def _register(username: str, password: str = "password123"):
        response = await client.post(
            "/auth/register", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["user"]

    return _register


@pytest.fixture
def login(client):
    """Log in as an existing user."""

    async def _login(username: str, password: str = "password123"):
        response = await client.post(
            "/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["user"]

    return _login
