"""
World model for the ore-field mining bot.

Core modules:
- map: grid coordinates and per-cell ore/hole knowledge
- units: robots, radars and traps
- state: per-turn world snapshot and shared item cooldowns
- fog_of_war: record of our own holes
- turn: robot actions and per-turn orders
- protocol: referee feed reader
"""

from .map import Coord, Cell, MineGrid, OFF_GRID, UNKNOWN_ORE
from .units import Entity, EntityKind, Item, Robot
from .state import Cooldowns, WorldSnapshot
from .fog_of_war import HoleLedger
from .turn import Action, ActionType, TurnOrders
from .protocol import ProtocolError, TurnReader

__all__ = [
    # Map
    "Coord", "Cell", "MineGrid", "OFF_GRID", "UNKNOWN_ORE",
    # Units
    "Entity", "EntityKind", "Item", "Robot",
    # State
    "Cooldowns", "WorldSnapshot",
    # Intel
    "HoleLedger",
    # Turn
    "Action", "ActionType", "TurnOrders",
    # Protocol
    "ProtocolError", "TurnReader",
]
