"""Logging setup for the dd2planner CLI."""

from __future__ import annotations

import logging
from typing import Final

# Library loggers that drown out import status lines at INFO.
NOISY_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger for CLI runs.

    Status lines go to stderr in a terse timestamped format. SQLAlchemy's engine
    and pool loggers stay at WARNING unless ``level`` asks for DEBUG output.
    Pass ``force=True`` to replace handlers installed by an earlier call.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)
