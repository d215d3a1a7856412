"""
Entities reported by the referee each turn: robots, radars and traps.

Entities are rebuilt from the feed every turn. Anything that must survive a
turn is keyed by the entity id elsewhere.
"""

from dataclasses import dataclass
from enum import Enum

from .map import Coord


class EntityKind(Enum):
    MY_ROBOT = 0
    OPPONENT_ROBOT = 1
    RADAR = 2
    TRAP = 3


class Item(Enum):
    """What a robot carries (protocol values)."""
    NONE = -1
    RADAR = 2
    TRAP = 3
    ORE = 4


@dataclass(frozen=True)
class Entity:
    """Radar or trap buried in the field."""
    id: int
    pos: Coord


@dataclass(frozen=True)
class Robot:
    """One robot as seen this turn."""
    id: int
    pos: Coord
    item: Item = Item.NONE

    @property
    def is_dead(self) -> bool:
        return self.pos.is_off_grid

    @property
    def is_at_headquarters(self) -> bool:
        return self.pos.x == 0

    def carries(self, item: Item) -> bool:
        return self.item is item

    @property
    def headquarters(self) -> Coord:
        """Closest headquarters cell: same row, column 0."""
        return Coord(0, self.pos.y)
