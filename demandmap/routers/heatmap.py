"""Heatmap API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from demandmap.auth.middleware import get_current_user
from demandmap.config import get_settings
from demandmap.database import get_db
from demandmap.heatmap import DemandEvent, build_heatmap
from demandmap.models import DemandEventRecord, User
from demandmap.schemas.heatmap import HeatmapRequest, HeatmapResponse
from demandmap.services.ingestion import as_utc

router = APIRouter(prefix="/api/heatmap", tags=["heatmap"])


def _check_resolution(resolution: int) -> None:
    """Reject resolutions outside the configured band."""
    settings = get_settings()
    if not settings.min_resolution <= resolution <= settings.max_resolution:
        raise HTTPException(
            status_code=422,
            detail=(
                f"resolution must be between {settings.min_resolution} "
                f"and {settings.max_resolution}"
            ),
        )


def _to_event(record: DemandEventRecord) -> DemandEvent:
    return DemandEvent(
        timestamp=as_utc(record.timestamp),
        latitude=float(record.latitude),
        longitude=float(record.longitude),
    )


@router.post("", response_model=HeatmapResponse)
async def compute_heatmap(request: HeatmapRequest) -> HeatmapResponse:
    """Aggregate the submitted demand and supply into hex cells."""
    result = build_heatmap(
        demand=[e.to_event() for e in request.demand],
        supply=[s.to_record() for s in request.supply],
        snapshot_time=request.snapshot_time,
        window_minutes=request.window_minutes,
        resolution=request.resolution,
    )
    return HeatmapResponse.from_result(result)


@router.get("/events", response_model=HeatmapResponse)
async def stored_events_heatmap(
    snapshot_time: datetime,
    window_minutes: int | None = Query(default=None, ge=0),
    resolution: int | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> HeatmapResponse:
    """Aggregate the current user's stored demand events (no supply)."""
    settings = get_settings()
    if window_minutes is None:
        window_minutes = settings.default_window_minutes
    if resolution is None:
        resolution = settings.default_resolution
    _check_resolution(resolution)

    result = await db.execute(
        select(DemandEventRecord).where(DemandEventRecord.user_id == user.id)
    )
    demand = [_to_event(r) for r in result.scalars().all()]

    heatmap = build_heatmap(
        demand=demand,
        supply=[],
        snapshot_time=as_utc(snapshot_time),
        window_minutes=window_minutes,
        resolution=resolution,
    )
    return HeatmapResponse.from_result(heatmap)
