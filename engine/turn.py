"""
Robot actions and the per-turn order batch.

Each owned robot receives exactly one action per turn, listed in the same
order as the robots appeared in the feed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .map import Coord
from .units import Item


class ActionType(Enum):
    WAIT = "WAIT"
    MOVE = "MOVE"
    DIG = "DIG"
    REQUEST = "REQUEST"


@dataclass(frozen=True)
class Action:
    """A single robot command. `message` is a free-form annotation."""
    type: ActionType
    target: Optional[Coord] = None
    item: Optional[Item] = None
    message: str = ""

    @classmethod
    def wait(cls, message: str = "") -> "Action":
        return cls(ActionType.WAIT, message=message)

    @classmethod
    def move(cls, target: Coord, message: str = "") -> "Action":
        return cls(ActionType.MOVE, target=target, message=message)

    @classmethod
    def dig(cls, target: Coord, message: str = "") -> "Action":
        return cls(ActionType.DIG, target=target, message=message)

    @classmethod
    def request(cls, item: Item, message: str = "") -> "Action":
        if item not in (Item.RADAR, Item.TRAP):
            raise ValueError(f"Cannot request {item.name}")
        return cls(ActionType.REQUEST, item=item, message=message)

    def to_command(self) -> str:
        """Render in the referee's wire format."""
        parts = [self.type.value]
        if self.type in (ActionType.MOVE, ActionType.DIG):
            parts += [str(self.target.x), str(self.target.y)]
        elif self.type is ActionType.REQUEST:
            parts.append(self.item.name)
        if self.message:
            parts.append(self.message)
        return " ".join(parts)


@dataclass
class TurnOrders:
    """Actions for one turn, in feed order of the robots."""
    turn: int
    robot_ids: list[int] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)

    def add(self, robot_id: int, action: Action):
        self.robot_ids.append(robot_id)
        self.actions.append(action)

    def commands(self) -> list[str]:
        return [action.to_command() for action in self.actions]

    def __len__(self) -> int:
        return len(self.actions)
