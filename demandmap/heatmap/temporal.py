"""Time filtering of demand events and supply records."""

from collections.abc import Iterable
from datetime import datetime, timedelta

from demandmap.heatmap.models import DemandEvent, SupplyRecord


def filter_demand(
    events: Iterable[DemandEvent],
    snapshot_time: datetime,
    window_minutes: int,
) -> list[DemandEvent]:
    """Keep events with timestamp in [snapshot - window, snapshot], bounds inclusive."""
    window_start = snapshot_time - timedelta(minutes=window_minutes)
    return [e for e in events if window_start <= e.timestamp <= snapshot_time]


def filter_supply(
    records: Iterable[SupplyRecord],
    snapshot_time: datetime,
) -> list[SupplyRecord]:
    """Keep vehicles whose availability interval contains the snapshot."""
    return [r for r in records if r.available_at(snapshot_time)]
