from __future__ import annotations

import enum


class UnknownSubCommandError(ValueError):
    pass


class SubCommand(str, enum.Enum):
    ATTACH = "attach"
    BUILD = "build"
    COMMIT = "commit"
    CP = "cp"
    DIFF = "diff"
    EXEC = "exec"
    EVENTS = "events"
    EXPORT = "export"
    HISTORY = "history"
    IMAGES = "images"
    IMPORT = "import"
    INFO = "info"
    INSPECT = "inspect"
    KILL = "kill"
    LOAD = "load"
    LOGIN = "login"
    LOGOUT = "logout"
    LOGS = "logs"
    PORT = "port"
    PAUSE = "pause"
    PS = "ps"
    PULL = "pull"
    PUSH = "push"
    RESTART = "restart"
    RM = "rm"
    RMI = "rmi"
    RUN = "run"
    SAVE = "save"
    SEARCH = "search"
    START = "start"
    STOP = "stop"
    TAG = "tag"
    TOP = "top"
    UNPAUSE = "unpause"
    VERSION = "version"
    WAIT = "wait"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: SubCommand | str) -> SubCommand:
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError as exc:
            raise UnknownSubCommandError(f"Unsupported docker sub-command: {value!r}") from exc


# Sub-commands whose first positional argument is an image reference.
IMAGE_POSITIONAL_COMMANDS = frozenset({SubCommand.RUN, SubCommand.RMI})


def supported_command_names() -> list[str]:
    return [command.value for command in SubCommand]
