"""
Main runner for the ore-field mining bot.

Reads the referee feed from stdin and writes one command per robot per turn
to stdout. Diagnostics go to stderr.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

from dotenv import load_dotenv

from engine import TurnReader, WorldSnapshot
from agents import AgentConfig, MinerAgent

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = Path(__file__).parent / "data" / "strategy.yaml"


class MatchRunner:
    """Runs one match over a pair of text streams."""

    def __init__(
        self,
        stdin: TextIO,
        stdout: TextIO,
        config: Optional[AgentConfig] = None,
    ):
        self.reader = TurnReader(stdin)
        self.stdout = stdout
        self.config = config or AgentConfig()
        self.world: Optional[WorldSnapshot] = None
        self.agent: Optional[MinerAgent] = None

    def initialize(self):
        """Read the field size and set up the world and the agent."""
        width, height = self.reader.read_dimensions()
        self.world = WorldSnapshot.create(
            width, height, self.config.radar_positions_for(width, height)
        )
        self.agent = MinerAgent(self.world, self.config)
        logger.info(f"Field {width}x{height}, {len(self.world.radar_positions)} radar spots")

    def run_turn(self):
        """Read one turn and answer it."""
        self.reader.read_turn(self.world)
        orders = self.agent.generate_orders()
        for command in orders.commands():
            self.stdout.write(command + "\n")
        self.stdout.flush()
        logger.debug(
            f"Turn {self.world.turn}: score {self.world.my_score}-{self.world.opponent_score}, "
            f"{len(self.agent.ledger)} own holes"
        )

    def run(self) -> int:
        """Play until the referee closes the feed. Returns turns played."""
        self.initialize()
        turns = 0
        while True:
            try:
                self.run_turn()
            except EOFError:
                break
            turns += 1
        logger.info(f"Feed closed after {turns} turns")
        return turns


def main(argv: Optional[list[str]] = None):
    """Run the bot against the referee on stdin/stdout."""
    load_dotenv(Path(__file__).parent / ".env")

    parser = argparse.ArgumentParser(description="Ore-field mining bot")
    parser.add_argument(
        "--strategy",
        default=os.getenv("MINER_STRATEGY", str(DEFAULT_STRATEGY)),
        help="Strategy YAML file",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MINER_LOG_LEVEL", "WARNING"),
        help="Logging level for stderr diagnostics",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = AgentConfig.from_yaml(args.strategy)
    MatchRunner(sys.stdin, sys.stdout, config).run()


if __name__ == "__main__":
    main()
