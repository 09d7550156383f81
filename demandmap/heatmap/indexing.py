"""Hexagonal grid indexing backed by the H3 library.

Every lookup here is fallible: instead of raising, a lookup that H3 rejects
(bad coordinate, resolution out of range, pentagon distortion) returns None so
callers can drop the point and carry on.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

import h3

logger = logging.getLogger(__name__)

_H3_ERRORS = (h3.H3BaseException, ValueError, TypeError)


class HexIndex(Protocol):
    """Hex-grid primitive the aggregation pass is built on."""

    def cell_for(self, lat: float, lng: float, resolution: int) -> str | None: ...

    def center_of(self, cell: str) -> tuple[float, float]: ...

    def ring_neighbors(self, cell: str) -> set[str] | None: ...


class H3Index:
    """HexIndex implementation using H3 v4."""

    def cell_for(self, lat: float, lng: float, resolution: int) -> str | None:
        """Return the cell containing (lat, lng), or None if H3 rejects it."""
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        try:
            return h3.latlng_to_cell(lat, lng, resolution)
        except _H3_ERRORS as e:
            logger.debug(f"Cell lookup failed for ({lat}, {lng}) @ {resolution}: {e}")
            return None

    def center_of(self, cell: str) -> tuple[float, float]:
        """Return the (lat, lng) center of a cell."""
        lat, lng = h3.cell_to_latlng(cell)
        return float(lat), float(lng)

    def ring_neighbors(self, cell: str) -> set[str] | None:
        """Return the cells at grid distance exactly 1, or None on failure."""
        try:
            disk = h3.grid_disk(cell, 1)
        except _H3_ERRORS as e:
            logger.debug(f"Neighbor lookup failed for {cell}: {e}")
            return None
        return set(disk) - {cell}


# Shared default instance
h3_index = H3Index()
