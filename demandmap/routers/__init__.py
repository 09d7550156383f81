"""API routers."""

from demandmap.routers.auth import router as auth_router
from demandmap.routers.events import router as events_router
from demandmap.routers.health import router as health_router
from demandmap.routers.heatmap import router as heatmap_router
from demandmap.routers.ingest import router as ingest_router

__all__ = [
    "auth_router",
    "events_router",
    "health_router",
    "heatmap_router",
    "ingest_router",
]
