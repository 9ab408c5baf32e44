from __future__ import annotations

import logging
import sys

from docker_cmd.settings import normalize_log_level

LOGGER = logging.getLogger("docker_cmd")
LOGGER.addHandler(logging.NullHandler())

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _has_output_handler() -> bool:
    return any(not isinstance(handler, logging.NullHandler) for handler in LOGGER.handlers)


def configure_logging(level: str, *, debug: bool = False) -> None:
    """Send package logs to stderr; ``debug`` overrides ``level`` for the trace."""
    normalized = "debug" if debug else normalize_log_level(level)
    handler = logging.StreamHandler(sys.__stderr__)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    LOGGER.handlers.clear()
    LOGGER.addHandler(handler)
    LOGGER.setLevel(getattr(logging, normalized.upper(), logging.INFO))
    LOGGER.propagate = False


def enable_debug_trace() -> None:
    # Keep handlers installed by the host application, only open the level.
    if _has_output_handler():
        LOGGER.setLevel(logging.DEBUG)
        return
    configure_logging("debug", debug=True)
