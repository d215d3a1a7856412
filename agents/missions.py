"""
Mission state machines.

A mission is bound to one robot and lives in the assignment table across
turns, while the robot itself is rebuilt from the feed every turn. Each turn
the mission turns the robot and the world into one action, and reports
whether it is finished.

Mission kinds:
- MOVE: walk to a cell
- DIG_ORE: dig ore at a cell and carry it to headquarters
- PLACE_ITEM: fetch an item at headquarters and bury it at a cell
- DENIAL: camp at headquarters planting traps while outnumbered

Two rules apply to every kind before its own logic: a trap of ours with
enough opponents around it is set off, and a robot carrying ore goes home.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from engine.fog_of_war import HoleLedger
from engine.map import Coord
from engine.state import WorldSnapshot
from engine.turn import Action, ActionType
from engine.units import Item, Robot

from .config import AgentConfig

logger = logging.getLogger(__name__)


@dataclass
class DecisionContext:
    """Everything a mission may consult or update during one turn."""
    world: WorldSnapshot
    ledger: HoleLedger
    config: AgentConfig

    def is_hazardous(self, coord: Coord) -> bool:
        """A trap stands there, or someone else dug a hole there."""
        return self.world.has_trap(coord) or self.ledger.was_dug_by_rival(coord)

    def request(self, robot: Robot, item: Item) -> bool:
        """Claim `item` for `robot` this turn."""
        return self.world.cooldowns.claim(item, robot.id, self.config.request_cooldown)


class MissionKind(Enum):
    MOVE = "move"
    DIG_ORE = "dig_ore"
    PLACE_ITEM = "place_item"
    DENIAL = "denial"


@dataclass
class Mission:
    """Per-robot plan. Only the fields relevant to `kind` are used."""
    kind: MissionKind
    target: Coord
    item: Item = Item.NONE  # PLACE_ITEM: what to bury
    just_dug: bool = False  # DIG_ORE: a dig was issued
    acquired: bool = False  # PLACE_ITEM: robot was seen holding the item
    retargets: int = 0  # PLACE_ITEM: times the target was shifted
    completed: bool = False

    @classmethod
    def move_to(cls, target: Coord) -> "Mission":
        return cls(MissionKind.MOVE, target)

    @classmethod
    def dig_ore(cls, target: Coord) -> "Mission":
        return cls(MissionKind.DIG_ORE, target)

    @classmethod
    def place_item(cls, target: Coord, item: Item = Item.RADAR) -> "Mission":
        return cls(MissionKind.PLACE_ITEM, target, item=item)

    @classmethod
    def denial(cls, target: Coord) -> "Mission":
        return cls(MissionKind.DENIAL, target, item=Item.TRAP)

    def __str__(self) -> str:
        if self.kind is MissionKind.MOVE:
            return f"Move to {self.target}"
        if self.kind is MissionKind.DIG_ORE:
            return f"Dig ore at {self.target}"
        if self.kind is MissionKind.PLACE_ITEM:
            return f"Place {self.item.name.lower()} at {self.target}"
        return "Deny at headquarters"


# --- Shared rules ---


def trap_to_trigger(robot: Robot, ctx: DecisionContext) -> Optional[Coord]:
    """Adjacent trap with the most opponents around it, if enough of them."""
    best, best_count = None, 0
    for trap in ctx.world.traps:
        if trap.pos in ctx.world.triggered_traps or robot.pos.distance(trap.pos) > 1:
            continue
        count = len(ctx.world.opponents_near(trap.pos))
        if count >= ctx.config.trap_trigger_min_opponents and count > best_count:
            best, best_count = trap.pos, count
    return best


def _shared_action(robot: Robot, ctx: DecisionContext) -> Optional[Action]:
    trap = trap_to_trigger(robot, ctx)
    if trap is not None:
        ctx.world.triggered_traps.add(trap)
        logger.info(f"Robot {robot.id} triggers trap at {trap}")
        return Action.dig(trap, "boom")

    if robot.carries(Item.ORE):
        return Action.move(robot.headquarters, "deliver")

    return None


# --- Dispatch ---


def next_action(mission: Mission, robot: Robot, ctx: DecisionContext) -> Action:
    """Action for `robot` this turn. Every DIG issued is recorded in the ledger."""
    action = _shared_action(robot, ctx)

    if action is None:
        if mission.kind is MissionKind.MOVE:
            action = Action.move(mission.target, "move")
        elif mission.kind is MissionKind.DIG_ORE:
            action = _dig_ore_action(mission, robot, ctx)
        elif mission.kind is MissionKind.PLACE_ITEM:
            action = _place_item_action(mission, robot, ctx)
        elif mission.kind is MissionKind.DENIAL:
            action = _denial_action(mission, robot, ctx)
        else:
            raise ValueError(f"Unknown mission kind: {mission.kind}")

    if action.type is ActionType.DIG:
        ctx.ledger.record_self_excavation(action.target)

    return action


def is_completed(mission: Mission, robot: Robot, ctx: DecisionContext) -> bool:
    """Whether the mission is over. Once True, stays True."""
    if mission.completed:
        return True

    if robot.is_dead:
        done = True
    elif mission.kind is MissionKind.MOVE:
        done = robot.pos == mission.target
    elif mission.kind is MissionKind.DIG_ORE:
        done = _dig_ore_completed(mission, robot, ctx)
    elif mission.kind is MissionKind.PLACE_ITEM:
        done = _place_item_completed(mission, robot, ctx)
    elif mission.kind is MissionKind.DENIAL:
        done = ctx.world.my_alive_count() >= ctx.world.opponent_alive_count()
    else:
        raise ValueError(f"Unknown mission kind: {mission.kind}")

    mission.completed = done
    return done


# --- DIG_ORE ---


def approach_cell(target: Coord, ctx: DecisionContext) -> Coord:
    """
    Cell next to `target` to dig from.

    West of the target first, so the robot stays on the headquarters side;
    one row down, then one row up when that cell is an opponent's hole.
    """
    for candidate in (target.offset(dx=-1), target.offset(dy=1), target.offset(dy=-1)):
        if ctx.world.grid.contains(candidate) and not ctx.ledger.was_dug_by_rival(candidate):
            return candidate
    return target


def _dig_ore_action(mission: Mission, robot: Robot, ctx: DecisionContext) -> Action:
    if robot.pos.distance(mission.target) <= 1:
        mission.just_dug = True
        return Action.dig(mission.target, "ore")

    if (
        robot.is_at_headquarters
        and robot.carries(Item.NONE)
        and ctx.config.harvest_requests_trap
        and ctx.request(robot, Item.TRAP)
    ):
        return Action.request(Item.TRAP, "trap")

    return Action.move(approach_cell(mission.target, ctx), "ore")


def _dig_ore_completed(mission: Mission, robot: Robot, ctx: DecisionContext) -> bool:
    delivered = robot.is_at_headquarters and robot.carries(Item.ORE)
    came_back_empty = mission.just_dug and robot.carries(Item.NONE)
    exhausted = ctx.world.grid.is_known_empty(mission.target) and not robot.carries(Item.ORE)
    return delivered or came_back_empty or exhausted or ctx.is_hazardous(mission.target)


# --- PLACE_ITEM ---


def _placement_blocked(mission: Mission, ctx: DecisionContext) -> bool:
    if ctx.is_hazardous(mission.target):
        return True
    return mission.item is Item.RADAR and ctx.world.has_radar(mission.target)


def _can_retarget(mission: Mission, ctx: DecisionContext) -> bool:
    shifted = mission.target.offset(dx=-1)
    return (
        mission.retargets < ctx.config.max_retargets
        and shifted.x >= 1
        and ctx.world.grid.contains(shifted)
    )


def _place_item_action(mission: Mission, robot: Robot, ctx: DecisionContext) -> Action:
    label = mission.item.name.lower()

    if not robot.carries(mission.item):
        if not robot.is_at_headquarters:
            return Action.move(robot.headquarters, f"fetch {label}")
        if ctx.request(robot, mission.item):
            return Action.request(mission.item, label)
        return Action.wait(f"wait {label}")

    while robot.pos.distance(mission.target) <= 1 and _placement_blocked(mission, ctx):
        if not _can_retarget(mission, ctx):
            return Action.move(robot.headquarters, f"{label} spot lost")
        mission.target = mission.target.offset(dx=-1)
        mission.retargets += 1
        logger.info(f"Robot {robot.id} shifts {label} target to {mission.target}")

    if robot.pos.distance(mission.target) <= 1:
        return Action.dig(mission.target, label)
    return Action.move(mission.target, label)


def _place_item_completed(mission: Mission, robot: Robot, ctx: DecisionContext) -> bool:
    if robot.carries(mission.item):
        mission.acquired = True

    if mission.acquired:
        if not robot.carries(mission.item):
            return True
        # Still holding it: give up only when the spot is taken for good
        return _placement_blocked(mission, ctx) and not _can_retarget(mission, ctx)

    return _placement_blocked(mission, ctx)


# --- DENIAL ---


def _is_clear(coord: Coord, ctx: DecisionContext) -> bool:
    grid = ctx.world.grid
    return grid.contains(coord) and not grid.has_hole(coord) and not ctx.world.has_trap(coord)


def nearest_clear_row(robot: Robot, ctx: DecisionContext) -> Optional[int]:
    """Row closest to the robot whose cell next to headquarters is untouched."""
    rows = sorted(range(ctx.world.height), key=lambda r: (abs(r - robot.pos.y), r))
    for row in rows:
        if _is_clear(Coord(1, row), ctx):
            return row
    return None


def _denial_action(mission: Mission, robot: Robot, ctx: DecisionContext) -> Action:
    if not robot.is_at_headquarters:
        return Action.move(robot.headquarters, "camp")

    if robot.carries(Item.TRAP):
        spot = Coord(1, robot.pos.y)
        if _is_clear(spot, ctx):
            return Action.dig(spot, "plant")
    elif ctx.request(robot, Item.TRAP):
        return Action.request(Item.TRAP, "denial")

    row = nearest_clear_row(robot, ctx)
    if row is None or row == robot.pos.y:
        return Action.wait("camp")
    return Action.move(Coord(0, row), "relocate")
