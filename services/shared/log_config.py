"""Logging setup shared by the planner service and the command line client."""
import logging
import os

from rich.logging import RichHandler


PLANNER_LOG_LEVEL = os.getenv("PLANNER_LOG_LEVEL", "INFO")


def configure_logging(level: str = PLANNER_LOG_LEVEL) -> None:
    """Route stdlib logging through rich. Safe to call more than once."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
