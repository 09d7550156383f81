"""One full aggregation pass, from raw points to map cells.

build_heatmap() is a pure function of its inputs: callers re-run it whenever
the datasets, snapshot time, window or resolution change and replace the
previous result wholesale.
"""

import logging
import math
from collections.abc import Sequence
from datetime import UTC, datetime

from demandmap.heatmap.aggregate import aggregate
from demandmap.heatmap.coverage import expand_coverage
from demandmap.heatmap.indexing import HexIndex, h3_index
from demandmap.heatmap.models import (
    AggregatedCell,
    CoverageCell,
    DemandEvent,
    HeatmapResult,
    SupplyRecord,
)
from demandmap.heatmap.ratio import DisplayMode, compute_ratio
from demandmap.heatmap.temporal import filter_demand, filter_supply

logger = logging.getLogger(__name__)


def _lng_lat(index: HexIndex, cell: str) -> tuple[float, float]:
    lat, lng = index.center_of(cell)
    return lng, lat


def build_heatmap(
    demand: Sequence[DemandEvent],
    supply: Sequence[SupplyRecord],
    snapshot_time: datetime,
    window_minutes: int,
    resolution: int,
    index: HexIndex = h3_index,
) -> HeatmapResult:
    """Filter, bucket, score and frame both datasets for one snapshot."""
    filtered_demand = filter_demand(demand, snapshot_time, window_minutes)
    available_supply = filter_supply(supply, snapshot_time)

    mode = DisplayMode.from_presence(bool(filtered_demand), bool(available_supply))
    counts = aggregate(filtered_demand, available_supply, resolution, index)

    active = [
        AggregatedCell(
            cell_id=cell,
            demand_count=c.demand,
            supply_count=c.supply,
            ratio=compute_ratio(c.demand, c.supply, mode),
            center=_lng_lat(index, cell),
        )
        for cell, c in counts.items()
    ]
    inactive = [
        CoverageCell(cell_id=cell, center=_lng_lat(index, cell))
        for cell in sorted(expand_coverage(counts.keys(), index))
    ]

    logger.debug(
        f"Created {len(active)} active hexagons from {len(filtered_demand)} demand "
        f"and {len(available_supply)} supply ({len(inactive)} border cells, mode={mode.value})"
    )

    return HeatmapResult(
        mode=mode,
        active_cells=active,
        inactive_cells=inactive,
        demand_total=len(filtered_demand),
        supply_total=len(available_supply),
        center=view_center(filtered_demand, available_supply),
    )


# ---------------------------------------------------------------------------
# Dataset summaries used to seed the map controls
# ---------------------------------------------------------------------------

def time_range(
    demand: Sequence[DemandEvent],
    supply: Sequence[SupplyRecord],
) -> tuple[datetime, datetime] | None:
    """Earliest and latest instant across demand timestamps and supply intervals."""
    times = [e.timestamp for e in demand]
    for r in supply:
        times.append(r.start_time)
        times.append(r.end_time)
    if not times:
        return None
    return min(times), max(times)


def default_snapshot(demand: Sequence[DemandEvent]) -> datetime | None:
    """Mean demand timestamp, used as the initial snapshot after an upload."""
    if not demand:
        return None
    mean_ts = sum(e.timestamp.timestamp() for e in demand) / len(demand)
    return datetime.fromtimestamp(mean_ts, tz=UTC)


def view_center(
    demand: Sequence[DemandEvent],
    supply: Sequence[SupplyRecord],
) -> tuple[float, float] | None:
    """Mean (lat, lng) over all given points, for centering the map.

    Points with a non-finite coordinate are skipped.
    """
    points = [
        (p.latitude, p.longitude)
        for p in (*demand, *supply)
        if math.isfinite(p.latitude) and math.isfinite(p.longitude)
    ]
    if not points:
        return None
    lat = sum(p[0] for p in points) / len(points)
    lng = sum(p[1] for p in points) / len(points)
    return lat, lng
