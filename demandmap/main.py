"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from demandmap import __version__
from demandmap.config import get_settings
from demandmap.database import close_db, init_db
from demandmap.routers import (
    auth_router,
    events_router,
    health_router,
    heatmap_router,
    ingest_router,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting DemandMap...")

    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down DemandMap...")
    await close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="DemandMap",
    description="Demand/supply ratio heatmaps on a hexagonal grid",
    version=__version__,
    lifespan=lifespan,
)

# Session cookie carries the logged-in user id
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=86400,  # 24 hours
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(events_router)
app.include_router(ingest_router)
app.include_router(heatmap_router)


@app.get("/")
async def root():
    """Root endpoint - shows API info."""
    return {
        "name": "DemandMap",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
