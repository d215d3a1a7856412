"""
Grid model for the ore field.

Cells are addressed by (x, y). Column x = 0 is headquarters, x grows towards
the far side of the field. Robots move and dig in 4 directions, so distances
are Manhattan.
"""

from dataclasses import dataclass
from typing import Iterator, Optional


UNKNOWN_ORE = "?"


@dataclass(frozen=True)
class Coord:
    """Grid coordinate, compared by value."""
    x: int
    y: int

    # Manhattan distance (4-directional map)
    def distance(self, other: "Coord") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def offset(self, dx: int = 0, dy: int = 0) -> "Coord":
        return Coord(self.x + dx, self.y + dy)

    @property
    def is_off_grid(self) -> bool:
        return self == OFF_GRID

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


# Position reported for destroyed robots
OFF_GRID = Coord(-1, -1)


@dataclass
class Cell:
    """Knowledge about one cell of the field."""
    ore: int = 0  # valid only when known
    known: bool = False  # ore amount revealed at least once
    hole: bool = False  # someone has dug here

    def update(self, ore: Optional[str | int], hole: bool):
        """Apply one turn's report for this cell."""
        self.hole = hole
        if ore is None or ore == UNKNOWN_ORE:
            return
        self.known = True
        self.ore = int(ore)


class MineGrid:
    """
    Per-cell knowledge of the field, accumulated across turns.

    Out of radar range the feed reports ore as unknown; the last revealed
    amount is kept in that case.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid grid size {width}x{height}")
        self.width = width
        self.height = height
        self.cells: list[list[Cell]] = [
            [Cell() for _ in range(height)] for _ in range(width)
        ]

    def contains(self, coord: Coord) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def cell(self, coord: Coord) -> Cell:
        return self.cells[coord.x][coord.y]

    def update(self, x: int, y: int, ore: Optional[str | int], hole: bool):
        """Record the feed's report for cell (x, y)."""
        self.cells[x][y].update(ore, hole)

    def has_hole(self, coord: Coord) -> bool:
        return self.contains(coord) and self.cell(coord).hole

    def is_known_empty(self, coord: Coord) -> bool:
        """True when the cell was revealed and holds no ore."""
        if not self.contains(coord):
            return False
        cell = self.cell(coord)
        return cell.known and cell.ore <= 0

    def revealed_ore_cells(self) -> Iterator[tuple[Coord, Cell]]:
        """Yield revealed cells that still hold ore. Callers sort."""
        for x, column in enumerate(self.cells):
            for y, cell in enumerate(column):
                if cell.known and cell.ore > 0:
                    yield Coord(x, y), cell

    def revealed_ore_count(self) -> int:
        return sum(1 for _ in self.revealed_ore_cells())
