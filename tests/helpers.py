from __future__ import annotations

import stat
import textwrap
from pathlib import Path

# Echoes every argument on its own line; the last argument selects a failure mode.
FAKE_DOCKER_SCRIPT = textwrap.dedent(
    """\
    #!/bin/sh
    last=""
    for arg in "$@"; do
      printf '%s\\n' "$arg"
      last="$arg"
    done
    case "$last" in
      fail-with-stderr) printf 'no such image\\n' >&2; exit 1 ;;
      fail-multiline) printf '  first line\\nsecond line  \\n' >&2; exit 4 ;;
      fail-silent) exit 3 ;;
      die-by-signal) kill -KILL $$ ;;
    esac
    exit 0
    """
)


def write_fake_docker(directory: Path) -> Path:
    script = directory / "docker"
    script.write_text(FAKE_DOCKER_SCRIPT, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def reset_package_logger() -> None:
    import logging

    from docker_cmd.logs import LOGGER

    LOGGER.handlers.clear()
    LOGGER.addHandler(logging.NullHandler())
    LOGGER.setLevel(logging.NOTSET)
    LOGGER.propagate = True
