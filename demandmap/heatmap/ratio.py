"""Demand/supply ratio policy and its display format."""

import math
from enum import Enum


class DisplayMode(str, Enum):
    """Map-wide metric mode, chosen from which datasets are present."""

    RATIO = "ratio"  # demand / supply
    COUNT = "count"  # raw demand count, no supply loaded
    EMPTY = "empty"  # no demand loaded

    @classmethod
    def from_presence(cls, demand_present: bool, supply_present: bool) -> "DisplayMode":
        """Pick the mode from global dataset presence, not per-cell counts."""
        if not demand_present:
            return cls.EMPTY
        if supply_present:
            return cls.RATIO
        return cls.COUNT


def compute_ratio(demand_count: int, supply_count: int, mode: DisplayMode) -> float:
    """Compute the metric for one cell.

    In ratio mode a cell with demand but no supply is infinite and a cell with
    neither is 0. Count mode returns the demand count unchanged.
    """
    if mode is DisplayMode.RATIO:
        if supply_count == 0:
            return math.inf if demand_count > 0 else 0.0
        return demand_count / supply_count
    if mode is DisplayMode.COUNT:
        return float(demand_count)
    return 0.0


def format_ratio(value: float) -> str:
    """Format a ratio for a map label."""
    if math.isinf(value):
        return "∞"
    if value == 0:
        return "0"
    if value < 0.01:
        return "<0.01"
    if value < 1:
        return f"{value:.2f}"
    if value < 10:
        return f"{value:.1f}"
    # Half-up: 12.5 -> 13
    return str(math.floor(value + 0.5))
