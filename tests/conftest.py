"""Shared test fixtures and helpers."""

import pytest

from agents import AgentConfig, DecisionContext
from engine import Coord, Entity, HoleLedger, Item, Robot, WorldSnapshot


# --- Helper functions ---


def robot(robot_id, x, y, item=Item.NONE):
    return Robot(robot_id, Coord(x, y), item)


def make_world(
    width=30,
    height=15,
    ore=None,
    holes=(),
    my_robots=(),
    opponents=(),
    radars=(),
    traps=(),
    radar_cooldown=0,
    trap_cooldown=0,
):
    """
    Build a world as if one turn had been read.

    ore: {(x, y): amount} for revealed cells
    holes, radars, traps: iterables of (x, y)
    """
    config = AgentConfig()
    world = WorldSnapshot.create(width, height, config.radar_positions_for(width, height))
    world.start_turn(0, 0)
    for (x, y), amount in (ore or {}).items():
        world.grid.update(x, y, amount, (x, y) in holes)
    for x, y in holes:
        world.grid.update(x, y, None, True)
    world.my_robots = list(my_robots)
    world.opponent_robots = list(opponents)
    world.radars = [Entity(100 + i, Coord(x, y)) for i, (x, y) in enumerate(radars)]
    world.traps = [Entity(200 + i, Coord(x, y)) for i, (x, y) in enumerate(traps)]
    world.cooldowns.reset(radar_cooldown, trap_cooldown)
    return world


def make_ctx(world, config=None, ledger=None):
    return DecisionContext(world, ledger or HoleLedger(world.grid), config or AgentConfig())


def many_ore_cells(count=10, row=14, amount=1):
    """Ore cells far away on one row, enough to pass the radar threshold."""
    return {(29 - i, row): amount for i in range(count)}


# --- Fixtures ---


@pytest.fixture
def config():
    return AgentConfig()


@pytest.fixture
def world():
    """Empty 30x15 field, cooldowns ready."""
    return make_world()
