"""Value types flowing through a heatmap aggregation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from demandmap.heatmap.ratio import DisplayMode, format_ratio


@dataclass(frozen=True)
class DemandEvent:
    """A single time-stamped demand point."""

    timestamp: datetime
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SupplyRecord:
    """A supply vehicle available over the closed interval [start_time, end_time]."""

    start_time: datetime
    end_time: datetime
    latitude: float
    longitude: float

    def available_at(self, instant: datetime) -> bool:
        """Check if the vehicle is available at the given instant (bounds inclusive)."""
        return self.start_time <= instant <= self.end_time


@dataclass(frozen=True)
class CellCounts:
    """Demand and supply tallies for one occupied cell."""

    demand: int = 0
    supply: int = 0


@dataclass(frozen=True)
class AggregatedCell:
    """An occupied cell with its counts and ratio metric."""

    cell_id: str
    demand_count: int
    supply_count: int
    ratio: float
    center: tuple[float, float]  # (lng, lat)

    @property
    def label(self) -> str:
        """Ratio formatted for display on the map."""
        return format_ratio(self.ratio)


@dataclass(frozen=True)
class CoverageCell:
    """An empty border cell drawn around occupied cells."""

    cell_id: str
    center: tuple[float, float]  # (lng, lat)


@dataclass(frozen=True)
class HeatmapResult:
    """Output of one aggregation pass."""

    mode: DisplayMode
    active_cells: list[AggregatedCell] = field(default_factory=list)
    inactive_cells: list[CoverageCell] = field(default_factory=list)
    demand_total: int = 0
    supply_total: int = 0
    center: tuple[float, float] | None = None  # (lat, lng) mean of filtered points
