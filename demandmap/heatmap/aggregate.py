"""Bucketing of demand and supply points into hex cells."""

from collections import Counter
from collections.abc import Iterable

from demandmap.heatmap.indexing import HexIndex, h3_index
from demandmap.heatmap.models import CellCounts, DemandEvent, SupplyRecord


def locate(
    points: Iterable[DemandEvent | SupplyRecord],
    resolution: int,
    index: HexIndex = h3_index,
) -> list[str]:
    """Map points to cell ids, dropping points the index cannot place."""
    cells = (index.cell_for(p.latitude, p.longitude, resolution) for p in points)
    return [cell for cell in cells if cell is not None]


def aggregate(
    demand: Iterable[DemandEvent],
    supply: Iterable[SupplyRecord],
    resolution: int,
    index: HexIndex = h3_index,
) -> dict[str, CellCounts]:
    """Count demand and supply per cell.

    Keyed by the union of cells touched by either dataset; a cell seen in only
    one of them gets 0 for the other.
    """
    demand_counts = Counter(locate(demand, resolution, index))
    supply_counts = Counter(locate(supply, resolution, index))

    return {
        cell: CellCounts(demand=demand_counts[cell], supply=supply_counts[cell])
        for cell in sorted(demand_counts.keys() | supply_counts.keys())
    }
