"""Entry-point for launching the CLI application."""
from __future__ import annotations

import logging
import os

from .presentation.cli.app import main as cli_main


def configure_logging() -> None:
    """Send engine diagnostics to stderr at the level named by ARENA_LOG_LEVEL."""
    level_name = os.getenv("ARENA_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main() -> None:
    """Run the CLI presentation layer."""
    configure_logging()
    cli_main()


if __name__ == "__main__":
    main()
