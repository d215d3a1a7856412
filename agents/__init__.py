"""
Mining agent for the ore-field match.

Assigns a mission to every robot and drives it to completion.
"""

from .config import AgentConfig
from .missions import DecisionContext, Mission, MissionKind, is_completed, next_action
from .assignment import AssignmentTable
from .miner import MinerAgent

__all__ = [
    "AgentConfig",
    "DecisionContext", "Mission", "MissionKind", "is_completed", "next_action",
    "AssignmentTable",
    "MinerAgent",
]
