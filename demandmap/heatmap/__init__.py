"""Spatio-temporal demand/supply aggregation on a hexagonal grid."""

from demandmap.heatmap.aggregate import aggregate
from demandmap.heatmap.coverage import expand_coverage
from demandmap.heatmap.indexing import H3Index, HexIndex, h3_index
from demandmap.heatmap.models import (
    AggregatedCell,
    CellCounts,
    CoverageCell,
    DemandEvent,
    HeatmapResult,
    SupplyRecord,
)
from demandmap.heatmap.pipeline import build_heatmap, default_snapshot, time_range, view_center
from demandmap.heatmap.ratio import DisplayMode, compute_ratio, format_ratio
from demandmap.heatmap.temporal import filter_demand, filter_supply

__all__ = [
    "AggregatedCell",
    "CellCounts",
    "CoverageCell",
    "DemandEvent",
    "DisplayMode",
    "H3Index",
    "HeatmapResult",
    "HexIndex",
    "SupplyRecord",
    "aggregate",
    "build_heatmap",
    "compute_ratio",
    "default_snapshot",
    "expand_coverage",
    "filter_demand",
    "filter_supply",
    "format_ratio",
    "h3_index",
    "time_range",
    "view_center",
]
