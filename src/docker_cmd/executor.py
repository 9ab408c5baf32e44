from __future__ import annotations

import signal
import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Optional

from docker_cmd.commands import IMAGE_POSITIONAL_COMMANDS, SubCommand
from docker_cmd.logs import LOGGER, enable_debug_trace
from docker_cmd.options import CAPTURE_OUTPUT_KEYS, CommandOptions, InvalidOptionError, OptionInput, append_options
from docker_cmd.settings import Settings

IMAGE_OPTION = "image"

Callback = Callable[[Optional[BaseException], Optional[str]], None]


class DockerCommandError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        signal_name: str | None = None,
        stderr: str = "",
        output: str | None = None,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.signal_name = signal_name
        self.stderr = stderr
        self.output = output


@dataclass(frozen=True)
class PreparedCommand:
    command: SubCommand
    argv: list[str]
    capture_output: bool


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one docker invocation: ``error`` is ``None`` on success."""

    argv: list[str] = field(default_factory=list)
    error: BaseException | None = None
    output: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str | None:
        if self.error is not None:
            raise self.error
        return self.output


def _reject_global_capture_switch(global_options: OptionInput) -> None:
    # The capture switch selects how docker runs; it has no meaning before the sub-command.
    if isinstance(global_options, CommandOptions):
        present = global_options.capture_output
    else:
        present = global_options is not None and any(key in global_options for key in CAPTURE_OUTPUT_KEYS)
    if present:
        raise InvalidOptionError("captureOutput is only accepted in command options, not in global options")


def build_argv(
    binary: str,
    sub_command: SubCommand | str,
    command_options: OptionInput = None,
    global_options: OptionInput = None,
) -> PreparedCommand:
    command = SubCommand.parse(sub_command)
    _reject_global_capture_switch(global_options)
    argv = [binary]
    append_options(argv, global_options)
    argv.append(command.value)

    options = CommandOptions.coerce(command_options)
    if command in IMAGE_POSITIONAL_COMMANDS:
        options = options.promote_to_positional(IMAGE_OPTION)
    capture_output = options.capture_output
    append_options(argv, options)
    return PreparedCommand(command=command, argv=argv, capture_output=capture_output)


def _termination_status(returncode: int) -> tuple[int | None, str | None]:
    if returncode >= 0:
        return returncode, None
    signal_number = -returncode
    try:
        return None, signal.Signals(signal_number).name
    except ValueError:
        return None, str(signal_number)


def _failure_label(returncode: int | None, signal_name: str | None) -> str:
    return str(returncode) if returncode else str(signal_name)


def _generic_failure_message(label: str) -> str:
    return f"Docker command failed with code/signal {label}"


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _run_inherited(argv: list[str]) -> CommandResult:
    process = subprocess.Popen(argv)
    returncode, signal_name = _termination_status(process.wait())
    if returncode or signal_name:
        label = _failure_label(returncode, signal_name)
        error = DockerCommandError(
            _generic_failure_message(label),
            returncode=returncode,
            signal_name=signal_name,
        )
        return CommandResult(argv=argv, error=error)
    return CommandResult(argv=argv)


def _run_captured(argv: list[str]) -> CommandResult:
    process = subprocess.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    raw_stdout, raw_stderr = process.communicate()
    output = _decode(raw_stdout)
    returncode, signal_name = _termination_status(process.returncode)
    if returncode or signal_name:
        label = _failure_label(returncode, signal_name)
        stderr = _decode(raw_stderr)
        condensed = stderr.replace("\n", "").strip()
        message = f"{condensed} (result={label})" if condensed else _generic_failure_message(label)
        error = DockerCommandError(
            message,
            returncode=returncode,
            signal_name=signal_name,
            stderr=stderr,
            output=output,
        )
        return CommandResult(argv=argv, error=error, output=output)
    return CommandResult(argv=argv, output=output)


def _sub_command_method(command: SubCommand) -> Callable[..., Future[CommandResult]]:
    def method(
        self: DockerCmd,
        command_options: OptionInput = None,
        global_options: OptionInput = None,
        callback: Callback | None = None,
    ) -> Future[CommandResult]:
        return self.execute(command, command_options, global_options, callback)

    method.__name__ = command.value
    method.__doc__ = f"Run ``docker {command.value}``."
    return method


class DockerCmd:
    """Runs ``docker`` sub-commands described by option mappings.

    Every call spawns one process and returns a ``Future`` resolving to a
    ``CommandResult``. The optional callback is invoked exactly once with
    ``(error, output)`` from the worker thread before the future resolves.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        if self.settings.debug:
            enable_debug_trace()

    def prepare(
        self,
        sub_command: SubCommand | str,
        command_options: OptionInput = None,
        global_options: OptionInput = None,
    ) -> PreparedCommand:
        return build_argv(self.settings.binary, sub_command, command_options, global_options)

    def execute(
        self,
        sub_command: SubCommand | str,
        command_options: OptionInput = None,
        global_options: OptionInput = None,
        callback: Callback | None = None,
    ) -> Future[CommandResult]:
        prepared = self.prepare(sub_command, command_options, global_options)
        if self.settings.debug:
            LOGGER.debug(
                "LIBDOCKER %r",
                {
                    "command": prepared.command.value,
                    "command_options": command_options,
                    "global_options": global_options,
                    "argv": prepared.argv,
                    "capture_output": prepared.capture_output,
                },
            )

        future: Future[CommandResult] = Future()
        future.set_running_or_notify_cancel()
        worker = threading.Thread(
            target=self._run_prepared,
            args=(prepared, callback, future),
            name=f"docker-cmd-{prepared.command.value}",
        )
        worker.start()
        return future

    def call(
        self,
        sub_command: SubCommand | str,
        command_options: OptionInput = None,
        global_options: OptionInput = None,
    ) -> str | None:
        return self.execute(sub_command, command_options, global_options).result().unwrap()

    def _run_prepared(
        self,
        prepared: PreparedCommand,
        callback: Callback | None,
        future: Future[CommandResult],
    ) -> None:
        LOGGER.debug("Spawning %s (capture_output=%s)", prepared.argv, prepared.capture_output)
        try:
            if prepared.capture_output:
                result = _run_captured(prepared.argv)
            else:
                result = _run_inherited(prepared.argv)
        except Exception as exc:
            # Spawn failures (OSError) reach the caller unwrapped.
            result = CommandResult(argv=prepared.argv, error=exc)

        if result.error is not None:
            LOGGER.info("docker %s failed: %s", prepared.command.value, result.error)

        if callback is not None:
            try:
                callback(result.error, result.output)
            except Exception:
                LOGGER.exception("docker %s completion callback raised", prepared.command.value)
        future.set_result(result)

    attach = _sub_command_method(SubCommand.ATTACH)
    build = _sub_command_method(SubCommand.BUILD)
    commit = _sub_command_method(SubCommand.COMMIT)
    cp = _sub_command_method(SubCommand.CP)
    diff = _sub_command_method(SubCommand.DIFF)
    exec = _sub_command_method(SubCommand.EXEC)
    events = _sub_command_method(SubCommand.EVENTS)
    export = _sub_command_method(SubCommand.EXPORT)
    history = _sub_command_method(SubCommand.HISTORY)
    images = _sub_command_method(SubCommand.IMAGES)
    import_ = _sub_command_method(SubCommand.IMPORT)
    info = _sub_command_method(SubCommand.INFO)
    inspect = _sub_command_method(SubCommand.INSPECT)
    kill = _sub_command_method(SubCommand.KILL)
    load = _sub_command_method(SubCommand.LOAD)
    login = _sub_command_method(SubCommand.LOGIN)
    logout = _sub_command_method(SubCommand.LOGOUT)
    logs = _sub_command_method(SubCommand.LOGS)
    port = _sub_command_method(SubCommand.PORT)
    pause = _sub_command_method(SubCommand.PAUSE)
    ps = _sub_command_method(SubCommand.PS)
    pull = _sub_command_method(SubCommand.PULL)
    push = _sub_command_method(SubCommand.PUSH)
    restart = _sub_command_method(SubCommand.RESTART)
    rm = _sub_command_method(SubCommand.RM)
    rmi = _sub_command_method(SubCommand.RMI)
    run = _sub_command_method(SubCommand.RUN)
    save = _sub_command_method(SubCommand.SAVE)
    search = _sub_command_method(SubCommand.SEARCH)
    start = _sub_command_method(SubCommand.START)
    stop = _sub_command_method(SubCommand.STOP)
    tag = _sub_command_method(SubCommand.TAG)
    top = _sub_command_method(SubCommand.TOP)
    unpause = _sub_command_method(SubCommand.UNPAUSE)
    version = _sub_command_method(SubCommand.VERSION)
    wait = _sub_command_method(SubCommand.WAIT)
