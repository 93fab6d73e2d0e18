"""
Logging configuration for pmu-events.

Diagnostics about malformed event files and unknown MSRs are routed through
the ``pmu_events`` logger and rendered on stderr with rich.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbosity: One of ``quiet`` (ERROR), ``normal`` (WARNING) or
            ``verbose`` (DEBUG), usually ``EventsConfig.verbosity``
        log_file: Optional file path that also receives pmu_events records

    Returns:
        Configured logger instance for pmu_events
    """
    level = _LEVELS[verbosity]
    verbose = verbosity == "verbose"

    console = Console(stderr=True)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                markup=False,
                show_time=verbose,
                show_path=verbose,
            )
        ],
    )

    logger = logging.getLogger("pmu_events")
    logger.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``name`` as a logger under the ``pmu_events`` namespace."""
    if name is None:
        return logging.getLogger("pmu_events")

    if not name.startswith("pmu_events"):
        name = f"pmu_events.{name}"

    return logging.getLogger(name)
