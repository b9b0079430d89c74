"""Logging setup for pypstree."""

import logging
import sys

# --- Define TRACE level ---
TRACE_LEVEL_NUM = 5
logging.addLevelName(TRACE_LEVEL_NUM, "TRACE")

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def level_from_name(level_name: str) -> int:
    """Translate a level name (case-insensitive) into a logging level number."""
    level_name_upper = level_name.upper()
    if level_name_upper not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level_name!r}; choose from {', '.join(LOG_LEVELS)}")
    if level_name_upper == "TRACE":
        return TRACE_LEVEL_NUM
    return getattr(logging, level_name_upper)


def setup_logging(level_name: str = "WARNING") -> None:
    """
    Configure the root logger to write to stderr.

    Stdout carries only the tree, so no handler may point there.
    """
    log_level = level_from_name(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers (e.g., from basicConfig in imports)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")
    )
    root_logger.addHandler(handler)

    logging.getLogger("pypstree").debug(
        f"Logging configured at level {logging.getLevelName(log_level)}."
    )
