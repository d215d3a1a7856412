"""
Referee protocol: reads the per-turn feed into a WorldSnapshot.

Feed layout:
- once:      "<width> <height>"
- each turn: "<my score> <opponent score>"
             <height> rows of 2*<width> tokens: ore amount or "?", hole 0/1
             "<entity count> <radar cooldown> <trap cooldown>"
             <entity count> lines "<id> <type> <x> <y> <item>"

Actions go back through Action.to_command(), one line per robot.
"""

import logging
from typing import TextIO

from .map import Coord, UNKNOWN_ORE
from .state import WorldSnapshot
from .units import Entity, EntityKind, Item, Robot

logger = logging.getLogger(__name__)


class ProtocolError(ValueError):
    """The feed does not match the expected layout."""


def _to_int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ProtocolError(f"Expected integer for {what}, got {token!r}") from None


class TurnReader:
    """Reads referee lines from a text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.lines_read = 0

    def _tokens(self, expected: int, what: str) -> list[str]:
        line = self.stream.readline()
        if not line:
            raise EOFError("Referee feed closed")
        self.lines_read += 1
        tokens = line.split()
        if len(tokens) != expected:
            raise ProtocolError(
                f"Line {self.lines_read} ({what}): expected {expected} fields, got {len(tokens)}"
            )
        return tokens

    def read_dimensions(self) -> tuple[int, int]:
        width, height = self._tokens(2, "map size")
        return _to_int(width, "width"), _to_int(height, "height")

    def read_turn(self, world: WorldSnapshot):
        """Read one full turn into `world`. Raises EOFError at end of feed."""
        my_score, opponent_score = self._tokens(2, "scores")
        world.start_turn(_to_int(my_score, "my score"), _to_int(opponent_score, "opponent score"))

        for y in range(world.height):
            row = self._tokens(2 * world.width, f"grid row {y}")
            for x in range(world.width):
                ore = row[2 * x]
                if ore != UNKNOWN_ORE:
                    ore = _to_int(ore, f"ore at ({x},{y})")
                hole = _to_int(row[2 * x + 1], f"hole at ({x},{y})") == 1
                world.grid.update(x, y, ore, hole)

        count, radar_cooldown, trap_cooldown = self._tokens(3, "entity header")
        world.cooldowns.reset(
            _to_int(radar_cooldown, "radar cooldown"),
            _to_int(trap_cooldown, "trap cooldown"),
        )

        for _ in range(_to_int(count, "entity count")):
            self._read_entity(world)

        logger.debug(
            f"Turn {world.turn}: {len(world.my_robots)} robots, "
            f"{len(world.opponent_robots)} opponents, {len(world.radars)} radars, "
            f"{len(world.traps)} traps"
        )

    def _read_entity(self, world: WorldSnapshot):
        entity_id, kind, x, y, item = (
            _to_int(token, "entity field") for token in self._tokens(5, "entity")
        )
        pos = Coord(x, y)
        try:
            kind = EntityKind(kind)
            item = Item(item)
        except ValueError as e:
            raise ProtocolError(f"Line {self.lines_read}: {e}") from None

        if kind is EntityKind.MY_ROBOT:
            world.my_robots.append(Robot(entity_id, pos, item))
        elif kind is EntityKind.OPPONENT_ROBOT:
            world.opponent_robots.append(Robot(entity_id, pos, item))
        elif kind is EntityKind.RADAR:
            world.radars.append(Entity(entity_id, pos))
        elif kind is EntityKind.TRAP:
            world.traps.append(Entity(entity_id, pos))
