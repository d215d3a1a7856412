"""
Hole intelligence: which holes on the field are ours.

The feed only says that a cell has a hole, not who dug it. Holes we did not
dig may hide opponent traps, so every dig we order is recorded here.
"""

import logging

from .map import Coord, MineGrid

logger = logging.getLogger(__name__)


class HoleLedger:
    """Append-only record of the cells our robots have dug."""

    def __init__(self, grid: MineGrid):
        self.grid = grid
        self._dug: set[Coord] = set()

    def record_self_excavation(self, coord: Coord):
        """Call once for every DIG action issued."""
        if coord not in self._dug:
            logger.debug(f"Recorded own hole at {coord}")
        self._dug.add(coord)

    def dug_by_us(self, coord: Coord) -> bool:
        return coord in self._dug

    def was_dug_by_rival(self, coord: Coord) -> bool:
        """True when the grid shows a hole at `coord` that we never dug."""
        return self.grid.has_hole(coord) and coord not in self._dug

    def __len__(self) -> int:
        return len(self._dug)
