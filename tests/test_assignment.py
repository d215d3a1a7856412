from agents import AgentConfig, AssignmentTable, Mission, MissionKind
from engine import Coord, Item

from conftest import make_ctx, make_world, many_ore_cells, robot


def assign_all(world, config=None):
    """Assign every robot in feed order, like one turn of the agent."""
    ctx = make_ctx(world, config)
    table = AssignmentTable(ctx.config)
    missions = [table.assign(bot, ctx) for bot in world.my_robots]
    return table, ctx, missions


class TestRadarPriority:
    def test_radar_before_ore_when_little_is_revealed(self):
        world = make_world(ore={(10, 5): 1}, my_robots=[robot(0, 0, 5)])
        _, _, (mission,) = assign_all(world)

        assert mission.kind is MissionKind.PLACE_ITEM
        assert mission.item is Item.RADAR
        assert mission.target == Coord(5, 3), "nearest constellation point"

    def test_radar_claimed_for_the_rest_of_the_turn(self):
        world = make_world(ore={(10, 5): 1}, my_robots=[robot(0, 0, 5), robot(1, 0, 6)])
        _, _, (first, second) = assign_all(world)

        assert first.kind is MissionKind.PLACE_ITEM
        assert second.kind is MissionKind.DIG_ORE
        assert second.target == Coord(10, 5)
        assert world.cooldowns.radar == AgentConfig().request_cooldown
        assert not world.cooldowns.is_ready(Item.RADAR, 1)

    def test_one_radar_fetch_at_a_time(self):
        world = make_world(my_robots=[robot(0, 0, 5)])
        table, ctx, _ = assign_all(world)

        # Next turn: cooldown back at zero, the first robot still walking
        world.cooldowns.reset(0, 0)
        mission = table.assign(robot(1, 3, 8), ctx)
        assert mission.kind is MissionKind.DIG_ORE

    def test_skips_spots_with_a_radar(self):
        world = make_world(my_robots=[robot(0, 0, 5)], radars=[(5, 3)])
        _, _, (mission,) = assign_all(world)
        assert mission.target == Coord(9, 7)

    def test_skips_spot_another_robot_is_placing(self):
        world = make_world(my_robots=[robot(0, 0, 5)])
        ctx = make_ctx(world)
        table = AssignmentTable(ctx.config)
        carrying = Mission.place_item(Coord(5, 3))
        carrying.acquired = True
        table.put(9, carrying)

        mission = table.assign(world.my_robots[0], ctx)
        assert mission.kind is MissionKind.PLACE_ITEM
        assert mission.target == Coord(9, 7)

    def test_skips_trapped_spot(self):
        world = make_world(my_robots=[robot(0, 0, 5)], traps=[(5, 3)])
        _, _, (mission,) = assign_all(world)
        assert mission.target == Coord(9, 7)

    def test_skips_spot_dug_by_rival(self):
        world = make_world(my_robots=[robot(0, 0, 5)], holes=[(5, 3)])
        _, _, (mission,) = assign_all(world)
        assert mission.target == Coord(9, 7)

    def test_no_radar_once_enough_ore_is_known(self):
        ore = many_ore_cells(10)
        world = make_world(ore=ore, my_robots=[robot(0, 0, 5)])
        _, _, (mission,) = assign_all(world)
        assert mission.kind is MissionKind.DIG_ORE


class TestOrePriority:
    def test_cell_capacity_is_respected(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 1
        world = make_world(ore=ore, my_robots=[robot(0, 9, 5), robot(1, 9, 6)], radar_cooldown=3)
        table, _, (first, second) = assign_all(world)

        assert first.target == Coord(10, 5)
        assert second.target == Coord(20, 14)
        assert table.assigned_count(Coord(10, 5)) == 1

    def test_cell_with_more_ore_takes_more_robots(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 2
        world = make_world(ore=ore, my_robots=[robot(0, 9, 5), robot(1, 9, 6)], radar_cooldown=3)
        _, _, missions = assign_all(world)
        assert [m.target for m in missions] == [Coord(10, 5), Coord(10, 5)]

    def test_surplus_released_when_ore_drops(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 2
        world = make_world(ore=ore, my_robots=[robot(0, 3, 5), robot(1, 3, 6)], radar_cooldown=3)
        table, ctx, _ = assign_all(world)

        world.grid.update(10, 5, 1, False)
        released = table.release_surplus(world.my_robots, ctx)

        assert released == [1]
        assert table.get(0).target == Coord(10, 5)
        assert 1 not in table

    def test_robot_that_dug_does_not_count_against_ore_left(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 2
        world = make_world(ore=ore, my_robots=[robot(0, 3, 5), robot(1, 3, 6)], radar_cooldown=3)
        table, ctx, (first, _) = assign_all(world)
        first.just_dug = True

        world.grid.update(10, 5, 1, False)
        assert table.release_surplus(world.my_robots, ctx) == []
        assert len(table) == 2

    def test_skips_trapped_and_rival_cells(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 3
        ore[(11, 5)] = 3
        ore[(12, 5)] = 3
        world = make_world(
            ore=ore,
            holes=[(11, 5)],
            traps=[(10, 5)],
            my_robots=[robot(0, 9, 5)],
            radar_cooldown=3,
        )
        _, _, (mission,) = assign_all(world)
        assert mission.target == Coord(12, 5)

    def test_own_hole_is_still_worth_digging(self):
        ore = many_ore_cells(10)
        ore[(10, 5)] = 2
        world = make_world(ore=ore, holes=[(10, 5)], my_robots=[robot(0, 9, 5)], radar_cooldown=3)
        ctx = make_ctx(world)
        ctx.ledger.record_self_excavation(Coord(10, 5))

        mission = AssignmentTable(ctx.config).assign(world.my_robots[0], ctx)
        assert mission.target == Coord(10, 5)


class TestFallback:
    def test_blind_dig_ahead(self):
        world = make_world(my_robots=[robot(0, 2, 5)], radar_cooldown=3)
        _, _, (mission,) = assign_all(world)
        assert mission.kind is MissionKind.DIG_ORE
        assert mission.target == Coord(6, 5)

    def test_blind_dig_skips_holes_and_taken_cells(self):
        world = make_world(holes=[(6, 5)], my_robots=[robot(0, 2, 5), robot(1, 2, 5)], radar_cooldown=3)
        _, _, missions = assign_all(world)
        assert [m.target for m in missions] == [Coord(7, 5), Coord(8, 5)]

    def test_regroup_when_row_is_used_up(self):
        world = make_world(holes=[(29, 5)], my_robots=[robot(0, 27, 5)], radar_cooldown=3)
        _, _, (mission,) = assign_all(world)
        assert mission.kind is MissionKind.MOVE
        assert mission.target == Coord(0, 5)


class TestDenialPriority:
    def opponents(self, count):
        return [robot(10 + i, 15, i) for i in range(count)]

    def test_one_denial_robot_while_outnumbered(self):
        world = make_world(my_robots=[robot(0, 0, 5), robot(1, 3, 5)], opponents=self.opponents(3))
        _, _, missions = assign_all(world)
        assert missions[0].kind is MissionKind.DENIAL
        assert missions[1].kind is not MissionKind.DENIAL

    def test_denial_disabled(self):
        world = make_world(my_robots=[robot(0, 0, 5)], opponents=self.opponents(2))
        _, _, (mission,) = assign_all(world, AgentConfig(denial_enabled=False))
        assert mission.kind is MissionKind.PLACE_ITEM

    def test_no_denial_at_parity(self):
        world = make_world(my_robots=[robot(0, 0, 5)], opponents=self.opponents(1))
        _, _, (mission,) = assign_all(world)
        assert mission.kind is not MissionKind.DENIAL


class TestTable:
    def test_completed_mission_is_removed(self):
        world = make_world()
        ctx = make_ctx(world)
        table = AssignmentTable(ctx.config)
        table.put(0, Mission.move_to(Coord(4, 4)))

        assert table.try_get_active(robot(0, 1, 1), ctx) is not None
        assert table.try_get_active(robot(0, 4, 4), ctx) is None
        assert 0 not in table

    def test_missing_mission(self):
        ctx = make_ctx(make_world())
        assert AssignmentTable(ctx.config).try_get_active(robot(3, 1, 1), ctx) is None

    def test_retain_drops_gone_robots(self):
        table = AssignmentTable(AgentConfig())
        table.put(0, Mission.move_to(Coord(1, 1)))
        table.put(1, Mission.move_to(Coord(2, 2)))
        table.retain({1})
        assert [robot_id for robot_id, _ in table.items()] == [1]
