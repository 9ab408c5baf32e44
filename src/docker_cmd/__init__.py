from __future__ import annotations

from docker_cmd.commands import IMAGE_POSITIONAL_COMMANDS, SubCommand, UnknownSubCommandError
from docker_cmd.executor import CommandResult, DockerCmd, DockerCommandError, build_argv
from docker_cmd.options import CommandOptions, InvalidOptionError, append_options, translate_options
from docker_cmd.settings import Settings

__all__ = [
    "IMAGE_POSITIONAL_COMMANDS",
    "CommandOptions",
    "CommandResult",
    "DockerCmd",
    "DockerCommandError",
    "InvalidOptionError",
    "Settings",
    "SubCommand",
    "UnknownSubCommandError",
    "append_options",
    "build_argv",
    "translate_options",
]
