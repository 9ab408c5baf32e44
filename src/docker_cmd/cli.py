from __future__ import annotations

import signal
from dataclasses import replace
from typing import Any

import click

from docker_cmd.commands import supported_command_names
from docker_cmd.executor import DockerCmd, DockerCommandError
from docker_cmd.logs import LOGGER, configure_logging
from docker_cmd.options import ARGS_KEY, CAPTURE_OUTPUT_KEYS, InvalidOptionError, parse_option_assignments
from docker_cmd.settings import LOG_LEVEL_CHOICES, Settings, normalize_log_level

SIGNAL_EXIT_BASE = 128


def _exit_code_for_error(error: BaseException) -> int:
    if not isinstance(error, DockerCommandError):
        return 1
    if error.returncode:
        return error.returncode
    try:
        return SIGNAL_EXIT_BASE + signal.Signals[str(error.signal_name)].value
    except KeyError:
        return 1


def _parse_assignments(assignments: tuple[str, ...], *, param_hint: str) -> dict[str, Any]:
    try:
        return dict(parse_option_assignments(assignments))
    except InvalidOptionError as exc:
        raise click.BadParameter(str(exc), param_hint=param_hint) from exc


@click.command(
    context_settings={"ignore_unknown_options": True},
    help=(
        "Run a docker sub-command built from KEY[=VALUE] option assignments. "
        "Arguments after the sub-command are passed to docker as they are; "
        "put them after -- when they clash with the options of this command."
    ),
)
@click.option(
    "--global",
    "global_assignments",
    multiple=True,
    metavar="KEY[=VALUE]",
    help="Option passed to docker before the sub-command. Repeat a key to pass it several times.",
)
@click.option(
    "--opt",
    "-o",
    "option_assignments",
    multiple=True,
    metavar="KEY[=VALUE]",
    help="Option passed to the sub-command. Repeat a key to pass it several times.",
)
@click.option("--image", default=None, help="Image reference (leading positional argument for run and rmi).")
@click.option("--capture", is_flag=True, default=False, help="Capture docker output and print it once the command exits.")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    help="Logging verbosity. Defaults to DOCKER_CMD_LOG_LEVEL or info.",
)
@click.argument("sub_command", type=click.Choice(supported_command_names()))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(
    global_assignments: tuple[str, ...],
    option_assignments: tuple[str, ...],
    image: str | None,
    capture: bool,
    log_level: str | None,
    sub_command: str,
    args: tuple[str, ...],
) -> None:
    settings = Settings.from_env()
    if log_level and not settings.debug:
        settings = replace(settings, log_level=normalize_log_level(log_level))
    configure_logging(settings.log_level, debug=settings.debug)

    global_options = _parse_assignments(global_assignments, param_hint="--global")
    command_options = _parse_assignments(option_assignments, param_hint="--opt")
    if image:
        command_options["image"] = image
    if capture:
        command_options[CAPTURE_OUTPUT_KEYS[0]] = True
    command_options[ARGS_KEY] = list(args)

    runner = DockerCmd(settings)
    result = runner.execute(sub_command, command_options, global_options).result()

    if result.output:
        click.echo(result.output, nl=False)
    if result.error is None:
        return
    if isinstance(result.error, OSError):
        raise click.ClickException(f"Unable to launch {settings.binary}: {result.error}")

    LOGGER.debug("Exiting after failed docker %s: %s", sub_command, result.error)
    if capture or not isinstance(result.error, DockerCommandError):
        click.echo(f"Error: {result.error}", err=True)
    click.get_current_context().exit(_exit_code_for_error(result.error))


if __name__ == "__main__":
    main()
