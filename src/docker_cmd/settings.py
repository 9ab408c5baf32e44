from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping

DEBUG_ENV = "DOCKER_CMD_DEBUG"
LEGACY_DEBUG_ENV = "NODE_DEBUG"
DEBUG_MARKER = "libdocker"
BINARY_ENV = "DOCKER_CMD_BINARY"
LOG_LEVEL_ENV = "DOCKER_CMD_LOG_LEVEL"
DEFAULT_BINARY = "docker"
DEFAULT_LOG_LEVEL = "info"
LOG_LEVEL_CHOICES = ("debug", "info", "warning", "error", "critical")


def _debug_enabled(raw_value: str) -> bool:
    markers = [token for token in re.split(r"[\s,]+", raw_value.strip().lower()) if token]
    return any(DEBUG_MARKER in token for token in markers)


def normalize_log_level(value: object) -> str:
    normalized = str(value or "").strip().lower()
    if normalized in LOG_LEVEL_CHOICES:
        return normalized
    return DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, resolved once and handed to ``DockerCmd``."""

    binary: str = DEFAULT_BINARY
    debug: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        source = os.environ if env is None else env
        debug = _debug_enabled(str(source.get(DEBUG_ENV, ""))) or _debug_enabled(str(source.get(LEGACY_DEBUG_ENV, "")))
        binary = str(source.get(BINARY_ENV, "")).strip() or DEFAULT_BINARY
        log_level = "debug" if debug else normalize_log_level(source.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL))
        return cls(binary=binary, debug=debug, log_level=log_level)
