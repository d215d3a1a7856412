"""
Strategy configuration for the mining agent.

Tunables live in data/strategy.yaml; dataclass defaults apply when the file
or a key is missing.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from engine.map import Coord

logger = logging.getLogger(__name__)


# Radar constellation for the reference 30x15 field, in priority order.
# Radar range is 4, so these points cover most of the ore band.
DEFAULT_RADAR_POSITIONS = [
    (9, 7),
    (13, 3),
    (13, 11),
    (17, 7),
    (5, 3),
    (5, 11),
    (21, 3),
    (21, 11),
    (25, 7),
]


@dataclass
class AgentConfig:
    """Configuration for the mining agent."""
    radar_ore_threshold: int = 8  # fewer revealed ore cells -> fetch a radar
    request_cooldown: int = 5  # turns an item stays unavailable once requested
    fallback_offset: int = 4  # columns ahead of the robot for blind digging
    max_retargets: int = 2  # radar placement shifts before giving up on a spot
    trap_trigger_min_opponents: int = 2
    harvest_requests_trap: bool = True
    denial_enabled: bool = True
    reference_width: int = 30
    reference_height: int = 15
    radar_positions: list[tuple[int, int]] = field(
        default_factory=lambda: list(DEFAULT_RADAR_POSITIONS)
    )

    def __post_init__(self):
        self.radar_positions = [tuple(p) for p in self.radar_positions]
        for p in self.radar_positions:
            if len(p) != 2:
                raise ValueError(f"Radar position must be [x, y], got {list(p)}")
        if self.reference_width <= 0 or self.reference_height <= 0:
            raise ValueError("Reference field size must be positive")
        if self.trap_trigger_min_opponents < 1:
            raise ValueError("trap_trigger_min_opponents must be at least 1")
        for name in ("radar_ore_threshold", "request_cooldown", "fallback_offset", "max_retargets"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @classmethod
    def from_yaml(cls, path: Path | str) -> "AgentConfig":
        """Load tunables from a YAML file, falling back to defaults."""
        path = Path(path)
        if not path.exists():
            logger.info(f"No strategy file at {path}, using defaults")
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        strategy = data.get("strategy", data)
        known = {f.name for f in fields(cls)}
        for key in strategy:
            if key not in known:
                logger.warning(f"Ignoring unknown strategy key: {key}")

        return cls(**{k: v for k, v in strategy.items() if k in known})

    def radar_positions_for(self, width: int, height: int) -> tuple[Coord, ...]:
        """Scale the reference constellation to a width x height field."""
        positions = []
        for x, y in self.radar_positions:
            coord = Coord(
                min(width - 1, x * width // self.reference_width),
                min(height - 1, y * height // self.reference_height),
            )
            if coord not in positions:
                positions.append(coord)
        return tuple(positions)
