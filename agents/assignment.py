"""
Assignment table: which mission each robot is on.

Robots are rebuilt from the feed every turn, so missions are kept here keyed
by robot id. Idle robots get a new mission from a fixed priority list:

0. denial, while we have fewer robots alive than the opponent
1. radar scouting, while little ore is revealed
2. nearest revealed ore cell with spare capacity
3. blind digging a few columns ahead
"""

import logging
from typing import Iterator, Optional

from engine.map import Coord
from engine.units import Item, Robot

from .config import AgentConfig
from .missions import DecisionContext, Mission, MissionKind, is_completed

logger = logging.getLogger(__name__)


class AssignmentTable:
    """Missions by robot id."""

    def __init__(self, config: AgentConfig):
        self.config = config
        self._missions: dict[int, Mission] = {}

    def __len__(self) -> int:
        return len(self._missions)

    def __contains__(self, robot_id: int) -> bool:
        return robot_id in self._missions

    def get(self, robot_id: int) -> Optional[Mission]:
        return self._missions.get(robot_id)

    def put(self, robot_id: int, mission: Mission):
        self._missions[robot_id] = mission
        logger.info(f"Robot {robot_id} assigned: {mission}")

    def items(self) -> list[tuple[int, Mission]]:
        return list(self._missions.items())

    def retain(self, robot_ids: set[int]):
        """Drop missions of robots that are gone."""
        for robot_id in list(self._missions):
            if robot_id not in robot_ids:
                logger.debug(f"Dropping mission of robot {robot_id}: {self._missions[robot_id]}")
                del self._missions[robot_id]

    def _others(self, robot_id: int) -> Iterator[Mission]:
        for other_id, mission in self._missions.items():
            if other_id != robot_id and not mission.completed:
                yield mission

    def assigned_count(self, coord: Coord, robot_id: int = -1) -> int:
        """Ore missions of other robots aimed at `coord`."""
        return sum(
            1 for m in self._others(robot_id)
            if m.kind is MissionKind.DIG_ORE and m.target == coord
        )

    def pending_radar_fetch(self, robot_id: int = -1) -> bool:
        """Another robot is on its way to pick up a radar."""
        return any(
            m.kind is MissionKind.PLACE_ITEM and m.item is Item.RADAR and not m.acquired
            for m in self._others(robot_id)
        )

    def release_surplus(self, robots: list[Robot], ctx: DecisionContext) -> list[int]:
        """
        Drop ore missions a cell can no longer supply.

        Only robots that have not dug yet count against the ore still known
        at the target; those earlier in `robots` keep their claim.
        Returns the ids of robots whose mission was dropped.
        """
        grid = ctx.world.grid
        claims: dict[Coord, int] = {}
        released = []
        for robot in robots:
            mission = self._missions.get(robot.id)
            if mission is None or mission.completed or mission.kind is not MissionKind.DIG_ORE:
                continue
            if mission.just_dug or robot.carries(Item.ORE):
                continue
            cell = grid.cell(mission.target)
            if not cell.known:
                continue
            claims[mission.target] = claims.get(mission.target, 0) + 1
            if claims[mission.target] > cell.ore:
                logger.debug(f"Robot {robot.id} released: {mission}, {cell.ore} ore left")
                del self._missions[robot.id]
                released.append(robot.id)
        return released

    def try_get_active(self, robot: Robot, ctx: DecisionContext) -> Optional[Mission]:
        """The robot's mission, unless it has none or it just completed."""
        mission = self._missions.get(robot.id)
        if mission is None:
            return None
        if is_completed(mission, robot, ctx):
            logger.debug(f"Robot {robot.id} completed: {mission}")
            del self._missions[robot.id]
            return None
        return mission

    def assign(self, robot: Robot, ctx: DecisionContext) -> Mission:
        """Pick and store a new mission for an idle robot. Never returns None."""
        mission = (
            self._denial_mission(robot, ctx)
            or self._radar_mission(robot, ctx)
            or self._ore_mission(robot, ctx)
            or self._fallback_mission(robot, ctx)
        )
        self.put(robot.id, mission)
        return mission

    def recommend_radar_position(
        self,
        ctx: DecisionContext,
        origin: Optional[Coord] = None,
        robot_id: int = -1,
    ) -> Optional[Coord]:
        """
        Free constellation point: no radar yet, not targeted by another
        placement mission and not hazardous.

        Nearest to `origin` when given, otherwise the first in priority order.
        """
        world = ctx.world
        claimed = {
            m.target for m in self._others(robot_id)
            if m.kind is MissionKind.PLACE_ITEM and m.item is Item.RADAR
        }
        candidates = [
            p for p in world.radar_positions
            if p not in claimed and not world.has_radar(p) and not ctx.is_hazardous(p)
        ]
        if not candidates:
            return None
        if origin is None:
            return candidates[0]
        return min(candidates, key=lambda p: p.distance(origin))

    def _denial_mission(self, robot: Robot, ctx: DecisionContext) -> Optional[Mission]:
        world = ctx.world
        if not self.config.denial_enabled:
            return None
        if world.my_alive_count() >= world.opponent_alive_count():
            return None
        if not world.cooldowns.is_ready(Item.TRAP, robot.id):
            return None
        if any(m.kind is MissionKind.DENIAL for m in self._others(robot.id)):
            return None
        return Mission.denial(robot.headquarters)

    def _radar_mission(self, robot: Robot, ctx: DecisionContext) -> Optional[Mission]:
        world = ctx.world
        if world.revealed_ore_count() >= self.config.radar_ore_threshold:
            return None
        if not world.cooldowns.is_ready(Item.RADAR, robot.id):
            return None
        if self.pending_radar_fetch(robot.id):
            return None

        target = self.recommend_radar_position(ctx, origin=robot.pos, robot_id=robot.id)
        if target is None:
            return None

        # Taken now so robots later in this turn do not also go for a radar
        ctx.request(robot, Item.RADAR)
        return Mission.place_item(target, Item.RADAR)

    def _ore_mission(self, robot: Robot, ctx: DecisionContext) -> Optional[Mission]:
        world = ctx.world
        cells = sorted(
            world.revealed_ore_cells(),
            key=lambda entry: (entry[0].distance(robot.pos), entry[0].x, entry[0].y),
        )
        for coord, cell in cells:
            if self.assigned_count(coord, robot.id) >= cell.ore:
                continue
            if world.has_trap(coord) or ctx.ledger.was_dug_by_rival(coord):
                continue
            return Mission.dig_ore(coord)
        return None

    def _fallback_mission(self, robot: Robot, ctx: DecisionContext) -> Mission:
        world = ctx.world
        grid = world.grid
        start = min(robot.pos.x + self.config.fallback_offset, world.width - 1)
        for x in range(start, world.width):
            coord = Coord(x, robot.pos.y)
            if grid.has_hole(coord) or world.has_trap(coord) or grid.is_known_empty(coord):
                continue
            if self.assigned_count(coord, robot.id) > 0:
                continue
            return Mission.dig_ore(coord)
        # Nothing safe left on this row: regroup at headquarters
        return Mission.move_to(robot.headquarters)
