"""
Mining agent: turns each world snapshot into one action per robot.
"""

import logging
from typing import Optional

from engine.fog_of_war import HoleLedger
from engine.state import WorldSnapshot
from engine.turn import Action, TurnOrders
from engine.units import Item, Robot

from .assignment import AssignmentTable
from .config import AgentConfig
from .missions import DecisionContext, Mission, next_action

logger = logging.getLogger(__name__)


class MinerAgent:
    """
    Turn orchestrator for our robots.

    Robots are handled one after another in feed order. Shared resources
    (item cooldowns, ore cell capacity, radar spots, traps to set off) are
    updated as each decision is made, so the first robot in the feed wins
    any contest within a turn.
    """

    def __init__(self, world: WorldSnapshot, config: Optional[AgentConfig] = None):
        self.world = world
        self.config = config or AgentConfig()
        self.ledger = HoleLedger(world.grid)
        self.assignments = AssignmentTable(self.config)
        self.turn_count = 0

    def context(self) -> DecisionContext:
        return DecisionContext(self.world, self.ledger, self.config)

    def generate_orders(self) -> TurnOrders:
        """Decide this turn's actions for every robot we own."""
        self.turn_count += 1
        ctx = self.context()
        world = self.world

        alive = [robot for robot in world.my_robots if not robot.is_dead]
        self.assignments.retain({robot.id for robot in alive})
        self.assignments.release_surplus(alive, ctx)

        if self.turn_count == 1:
            self._assign_opening_radar(alive, ctx)

        orders = TurnOrders(turn=world.turn)
        for robot in world.my_robots:
            if robot.is_dead:
                orders.add(robot.id, Action.wait("dead"))
                continue

            mission = self.assignments.try_get_active(robot, ctx)
            if mission is None:
                mission = self.assignments.assign(robot, ctx)
            assert mission is not None, f"Robot {robot.id} left without a mission"

            action = next_action(mission, robot, ctx)
            logger.debug(f"Robot {robot.id} on mission {mission} -> {action.to_command()}")
            orders.add(robot.id, action)

        logger.debug(f"Turn {orders.turn}: {len(self.assignments)} missions active")
        return orders

    def _assign_opening_radar(self, robots: list[Robot], ctx: DecisionContext):
        """First turn: send the robot closest to the first radar spot for a radar."""
        if not robots or not all(robot.is_at_headquarters for robot in robots):
            return
        if not self.world.cooldowns.is_ready(Item.RADAR):
            return

        target = self.assignments.recommend_radar_position(ctx)
        if target is None:
            return

        robot = min(robots, key=lambda r: r.pos.distance(target))
        self.assignments.put(robot.id, Mission.place_item(target, Item.RADAR))
        ctx.request(robot, Item.RADAR)
