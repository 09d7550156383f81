"""Border of empty cells drawn around the occupied region."""

from collections.abc import Iterable

from demandmap.heatmap.indexing import HexIndex, h3_index


def expand_coverage(occupied: Iterable[str], index: HexIndex = h3_index) -> set[str]:
    """Return the ring-1 neighbors of all occupied cells, minus the occupied cells.

    A cell whose neighbor lookup fails contributes nothing.
    """
    occupied = set(occupied)
    rings = (index.ring_neighbors(cell) for cell in occupied)
    fringe: set[str] = set()
    for ring in rings:
        if ring is not None:
            fringe |= ring
    return fringe - occupied
