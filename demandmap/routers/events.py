"""Per-user storage of uploaded demand events."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from demandmap.auth.middleware import get_current_user
from demandmap.database import get_db
from demandmap.models import DemandEventRecord, User
from demandmap.schemas.events import (
    ClearResponse,
    EventResponse,
    EventUploadRequest,
    EventUploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


@router.post("/upload", response_model=EventUploadResponse)
async def upload_events(
    payload: EventUploadRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> EventUploadResponse:
    """Store a batch of demand events for the current user."""
    records = [
        DemandEventRecord(
            user_id=user.id,
            timestamp=event.timestamp,
            latitude=event.latitude,
            longitude=event.longitude,
        )
        for event in payload.events
    ]
    db.add_all(records)
    await db.commit()

    logger.info(f"Stored {len(records)} events for user {user.id}")
    return EventUploadResponse(success=True, count=len(records))


@router.get("", response_model=list[EventResponse])
async def list_events(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[EventResponse]:
    """List the current user's events, oldest first."""
    result = await db.execute(
        select(DemandEventRecord)
        .where(DemandEventRecord.user_id == user.id)
        .order_by(DemandEventRecord.timestamp, DemandEventRecord.created_at)
    )
    return [EventResponse.model_validate(r) for r in result.scalars().all()]


@router.delete("", response_model=ClearResponse)
async def clear_events(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> ClearResponse:
    """Delete all of the current user's events."""
    result = await db.execute(
        delete(DemandEventRecord).where(DemandEventRecord.user_id == user.id)
    )
    await db.commit()

    logger.info(f"Cleared {result.rowcount} events for user {user.id}")
    return ClearResponse(success=True, deleted=result.rowcount or 0)
