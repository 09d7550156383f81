"""Schemas for heatmap requests and the cells handed to the map client."""

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from demandmap.config import get_settings
from demandmap.heatmap import (
    AggregatedCell,
    CoverageCell,
    DemandEvent,
    DisplayMode,
    HeatmapResult,
    SupplyRecord,
)
from demandmap.services.ingestion import as_utc


class DemandEventIn(BaseModel):
    """A demand point."""

    timestamp: datetime
    latitude: float
    longitude: float

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Compare all instants in UTC."""
        return as_utc(v)

    def to_event(self) -> DemandEvent:
        return DemandEvent(
            timestamp=self.timestamp,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class SupplyRecordIn(BaseModel):
    """A supply vehicle and its availability interval."""

    start_time: datetime
    end_time: datetime
    latitude: float
    longitude: float

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v: datetime) -> datetime:
        """Compare all instants in UTC."""
        return as_utc(v)

    def to_record(self) -> SupplyRecord:
        return SupplyRecord(
            start_time=self.start_time,
            end_time=self.end_time,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class HeatmapParams(BaseModel):
    """Snapshot, lookback window and grid resolution for one pass."""

    snapshot_time: datetime
    window_minutes: int = Field(
        default_factory=lambda: get_settings().default_window_minutes, ge=0
    )
    resolution: int = Field(default_factory=lambda: get_settings().default_resolution)

    @field_validator("snapshot_time")
    @classmethod
    def normalize_snapshot(cls, v: datetime) -> datetime:
        """Compare all instants in UTC."""
        return as_utc(v)

    @model_validator(mode="after")
    def check_resolution(self) -> "HeatmapParams":
        """Resolution must lie within the configured band."""
        settings = get_settings()
        if not settings.min_resolution <= self.resolution <= settings.max_resolution:
            raise ValueError(
                f"resolution must be between {settings.min_resolution} "
                f"and {settings.max_resolution}"
            )
        return self


class HeatmapRequest(HeatmapParams):
    """Both datasets plus the pass parameters."""

    demand: list[DemandEventIn] = []
    supply: list[SupplyRecordIn] = []


class ActiveCellResponse(BaseModel):
    """An occupied cell.

    JSON has no infinity, so an infinite ratio is sent as ratio=None with
    infinite=True.
    """

    cell_id: str
    demand_count: int
    supply_count: int
    ratio: float | None
    infinite: bool = False
    label: str
    center: tuple[float, float]  # (lng, lat)

    @classmethod
    def from_cell(cls, cell: AggregatedCell) -> "ActiveCellResponse":
        infinite = math.isinf(cell.ratio)
        return cls(
            cell_id=cell.cell_id,
            demand_count=cell.demand_count,
            supply_count=cell.supply_count,
            ratio=None if infinite else cell.ratio,
            infinite=infinite,
            label=cell.label,
            center=cell.center,
        )


class InactiveCellResponse(BaseModel):
    """An empty border cell."""

    cell_id: str
    center: tuple[float, float]  # (lng, lat)

    @classmethod
    def from_cell(cls, cell: CoverageCell) -> "InactiveCellResponse":
        return cls(cell_id=cell.cell_id, center=cell.center)


class HeatmapResponse(BaseModel):
    """Cells for the map overlay."""

    mode: DisplayMode
    active_cells: list[ActiveCellResponse]
    inactive_cells: list[InactiveCellResponse]
    demand_count: int
    supply_count: int
    center: tuple[float, float] | None = None  # (lat, lng)

    @classmethod
    def from_result(cls, result: HeatmapResult) -> "HeatmapResponse":
        return cls(
            mode=result.mode,
            active_cells=[ActiveCellResponse.from_cell(c) for c in result.active_cells],
            inactive_cells=[InactiveCellResponse.from_cell(c) for c in result.inactive_cells],
            demand_count=result.demand_total,
            supply_count=result.supply_total,
            center=result.center,
        )


class TimeRange(BaseModel):
    """Earliest and latest instant in the loaded data."""

    start: datetime
    end: datetime


class DemandIngestResponse(BaseModel):
    """Demand events parsed from an uploaded file."""

    count: int
    events: list[DemandEventIn]
    time_range: TimeRange | None = None
    default_snapshot: datetime | None = None


class SupplyIngestResponse(BaseModel):
    """Supply vehicles parsed from an uploaded file."""

    count: int
    vehicles: list[SupplyRecordIn]
    time_range: TimeRange | None = None
