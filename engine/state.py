"""
World snapshot: what is known about the match at the current turn.

The grid persists for the whole match; robots, radars, traps, cooldowns and
scores are replaced wholesale every turn by the protocol reader.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .map import Coord, MineGrid
from .units import Entity, Item, Robot


@dataclass
class Cooldowns:
    """
    Item cooldowns shared by every robot.

    The feed gives one counter per item. When a robot decides to request an
    item the counter is advanced at once and the claim is recorded, so robots
    evaluated later in the same turn see the item as taken. The robot holding
    the claim still sees it as available.
    """
    radar: int = 0
    trap: int = 0
    claims: dict[Item, int] = field(default_factory=dict)  # item -> robot id

    def reset(self, radar: int, trap: int):
        """Load the feed's counters for a new turn and drop stale claims."""
        self.radar = radar
        self.trap = trap
        self.claims.clear()

    def get(self, item: Item) -> int:
        if item is Item.RADAR:
            return self.radar
        if item is Item.TRAP:
            return self.trap
        raise ValueError(f"No cooldown for {item.name}")

    def is_ready(self, item: Item, robot_id: Optional[int] = None) -> bool:
        """Whether `item` can be requested (by `robot_id`, if given)."""
        claimant = self.claims.get(item)
        if claimant is not None:
            return robot_id is not None and claimant == robot_id
        return self.get(item) == 0

    def claim(self, item: Item, robot_id: int, turns: int) -> bool:
        """Reserve `item` for `robot_id`; False if someone else got it first."""
        if not self.is_ready(item, robot_id):
            return False
        self.claims[item] = robot_id
        if item is Item.RADAR:
            self.radar = max(self.radar, turns)
        else:
            self.trap = max(self.trap, turns)
        return True


@dataclass
class WorldSnapshot:
    """Complete view of the match for the current turn."""
    grid: MineGrid
    radar_positions: tuple[Coord, ...] = ()  # recommended radar constellation
    turn: int = 0
    my_score: int = 0
    opponent_score: int = 0
    my_robots: list[Robot] = field(default_factory=list)
    opponent_robots: list[Robot] = field(default_factory=list)
    radars: list[Entity] = field(default_factory=list)
    traps: list[Entity] = field(default_factory=list)
    cooldowns: Cooldowns = field(default_factory=Cooldowns)
    triggered_traps: set[Coord] = field(default_factory=set)  # this turn only

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        radar_positions: Iterable[Coord] = (),
    ) -> "WorldSnapshot":
        grid = MineGrid(width, height)
        positions = tuple(p for p in radar_positions if grid.contains(p))
        return cls(grid=grid, radar_positions=positions)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def start_turn(self, my_score: int, opponent_score: int):
        """Clear per-turn entities before the feed's entity list is read."""
        self.turn += 1
        self.my_score = my_score
        self.opponent_score = opponent_score
        self.my_robots = []
        self.opponent_robots = []
        self.radars = []
        self.traps = []
        self.triggered_traps.clear()

    def has_trap(self, coord: Coord) -> bool:
        return any(trap.pos == coord for trap in self.traps)

    def has_radar(self, coord: Coord) -> bool:
        return any(radar.pos == coord for radar in self.radars)

    def revealed_ore_cells(self):
        return self.grid.revealed_ore_cells()

    def revealed_ore_count(self) -> int:
        return self.grid.revealed_ore_count()

    def alive(self, robots: list[Robot]) -> list[Robot]:
        return [robot for robot in robots if not robot.is_dead]

    def my_alive_count(self) -> int:
        return len(self.alive(self.my_robots))

    def opponent_alive_count(self) -> int:
        return len(self.alive(self.opponent_robots))

    def opponents_near(self, coord: Coord, radius: int = 1) -> list[Robot]:
        return [
            robot for robot in self.alive(self.opponent_robots)
            if robot.pos.distance(coord) <= radius
        ]
