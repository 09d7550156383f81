"""Schemas for stored demand events."""

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from demandmap.services.ingestion import as_utc

MAX_EVENTS_PER_UPLOAD = 100_000


def _validate_decimal(v: str) -> str:
    v = v.strip()
    try:
        number = float(v)
    except ValueError:
        raise ValueError("must be a decimal number") from None
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return v


class EventIn(BaseModel):
    """A demand event as submitted by the client.

    Latitude and longitude are decimal strings and are stored verbatim.
    """

    timestamp: datetime
    latitude: str = Field(..., min_length=1, max_length=32)
    longitude: str = Field(..., min_length=1, max_length=32)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Store timestamps in UTC."""
        return as_utc(v)

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: str) -> str:
        """Latitude must be a decimal in [-90, 90]."""
        v = _validate_decimal(v)
        if not -90 <= float(v) <= 90:
            raise ValueError("latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: str) -> str:
        """Longitude must be a decimal in [-180, 180]."""
        v = _validate_decimal(v)
        if not -180 <= float(v) <= 180:
            raise ValueError("longitude must be between -180 and 180")
        return v


class EventUploadRequest(BaseModel):
    """Batch of events to store for the current user."""

    events: list[EventIn] = Field(..., max_length=MAX_EVENTS_PER_UPLOAD)


class EventUploadResponse(BaseModel):
    """Result of an event upload."""

    success: bool
    count: int


class EventResponse(BaseModel):
    """A stored demand event."""

    id: str
    timestamp: datetime
    latitude: str
    longitude: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("timestamp", "created_at")
    @classmethod
    def restore_utc(cls, v: datetime | None) -> datetime | None:
        """Backends without timezone support hand back naive UTC values."""
        return as_utc(v) if v is not None else None


class ClearResponse(BaseModel):
    """Result of clearing a user's events."""

    success: bool
    deleted: int = 0
