"""Spreadsheet upload endpoints."""

import asyncio
import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from demandmap.config import get_settings
from demandmap.heatmap import default_snapshot, time_range
from demandmap.schemas.heatmap import (
    DemandEventIn,
    DemandIngestResponse,
    SupplyIngestResponse,
    SupplyRecordIn,
    TimeRange,
)
from demandmap.services.ingestion import IngestionError, load_demand, load_supply

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ingest", tags=["ingest"])


async def _read_upload(file: UploadFile) -> bytes:
    """Read an upload, enforcing the configured size limit."""
    limit = get_settings().max_upload_bytes
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {limit} bytes",
        )
    return content


def _time_range(bounds) -> TimeRange | None:
    if bounds is None:
        return None
    return TimeRange(start=bounds[0], end=bounds[1])


@router.post("/demand", response_model=DemandIngestResponse)
async def ingest_demand(file: UploadFile = File(...)) -> DemandIngestResponse:
    """Parse a demand spreadsheet (timestamp, latitude, longitude)."""
    content = await _read_upload(file)
    try:
        events = await asyncio.to_thread(load_demand, file.filename or "", content)
    except IngestionError as e:
        logger.warning(f"Rejected demand upload {file.filename}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return DemandIngestResponse(
        count=len(events),
        events=[
            DemandEventIn(timestamp=e.timestamp, latitude=e.latitude, longitude=e.longitude)
            for e in events
        ],
        time_range=_time_range(time_range(events, [])),
        default_snapshot=default_snapshot(events),
    )


@router.post("/supply", response_model=SupplyIngestResponse)
async def ingest_supply(file: UploadFile = File(...)) -> SupplyIngestResponse:
    """Parse a supply spreadsheet (start_time, end_time, latitude, longitude)."""
    content = await _read_upload(file)
    try:
        records = await asyncio.to_thread(load_supply, file.filename or "", content)
    except IngestionError as e:
        logger.warning(f"Rejected supply upload {file.filename}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SupplyIngestResponse(
        count=len(records),
        vehicles=[
            SupplyRecordIn(
                start_time=r.start_time,
                end_time=r.end_time,
                latitude=r.latitude,
                longitude=r.longitude,
            )
            for r in records
        ],
        time_range=_time_range(time_range([], records)),
    )
