from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence, Union

ARGS_KEY = "_"
CAPTURE_OUTPUT_KEYS = ("captureOutput", "capture_output")

Scalar = Union[str, int, float, bool]
OptionValue = Union[None, Scalar, Sequence[Scalar]]
OptionInput = Union["CommandOptions", Mapping[str, Any], None]


class InvalidOptionError(ValueError):
    pass


def _is_scalar(value: object) -> bool:
    return isinstance(value, (str, int, float, bool))


def _validate_option_name(name: object) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidOptionError(f"Option name must be a non-empty string: {name!r}")
    if name.startswith("-"):
        raise InvalidOptionError(f"Option name must not include leading dashes: {name!r}")
    if any(char.isspace() for char in name):
        raise InvalidOptionError(f"Option name must not contain whitespace: {name!r}")
    return name


def _validate_option_value(name: str, value: object) -> OptionValue:
    if value is None or _is_scalar(value):
        return value  # type: ignore[return-value]
    if isinstance(value, (list, tuple)):
        for item in value:
            if item is not None and not _is_scalar(item):
                raise InvalidOptionError(f"Invalid element in option {name!r}: {item!r}")
        return list(value)
    raise InvalidOptionError(f"Invalid value for option {name!r}: {value!r}")


def _normalize_args(raw_args: object) -> list[str]:
    if raw_args is None:
        return []
    if isinstance(raw_args, str):
        return [raw_args]
    if not isinstance(raw_args, (list, tuple)):
        raise InvalidOptionError(f"Positional arguments must be a string or a list of strings: {raw_args!r}")
    args: list[str] = []
    for item in raw_args:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise InvalidOptionError(f"Invalid positional argument: {item!r}")
        args.append(str(item))
    return args


@dataclass
class CommandOptions:
    """Typed form of a docker option bag.

    ``flags`` keeps insertion order; ``args`` holds the positional arguments
    that follow every flag. ``capture_output`` selects the execution mode and
    is never translated into a flag.
    """

    flags: dict[str, OptionValue] = field(default_factory=dict)
    args: list[str] = field(default_factory=list)
    capture_output: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> CommandOptions:
        if mapping is None:
            return cls()
        if not isinstance(mapping, Mapping):
            raise InvalidOptionError(f"Options must be a mapping, got {type(mapping).__name__}")

        flags: dict[str, OptionValue] = {}
        args: list[str] = []
        capture_output = False
        for raw_name, raw_value in mapping.items():
            if raw_name == ARGS_KEY:
                args = _normalize_args(raw_value)
                continue
            if raw_name in CAPTURE_OUTPUT_KEYS:
                capture_output = capture_output or bool(raw_value)
                continue
            name = _validate_option_name(raw_name)
            flags[name] = _validate_option_value(name, raw_value)
        return cls(flags=flags, args=args, capture_output=capture_output)

    @classmethod
    def coerce(cls, options: OptionInput) -> CommandOptions:
        if isinstance(options, cls):
            return cls(flags=dict(options.flags), args=list(options.args), capture_output=options.capture_output)
        return cls.from_mapping(options)

    def promote_to_positional(self, name: str) -> CommandOptions:
        """Move the flag ``name`` to the front of the positional arguments.

        Only a non-empty reference is moved: empty values (``None``, ``False``,
        ``""``, ``0``, ``[]``) and a bare ``True`` stay regular flags.
        """
        value = self.flags.get(name)
        if not value or value is True:
            return self
        flags = {key: item for key, item in self.flags.items() if key != name}
        promoted = [str(item) for item in value if item is not None] if isinstance(value, list) else [str(value)]
        return CommandOptions(flags=flags, args=[*promoted, *self.args], capture_output=self.capture_output)

    def to_mapping(self) -> dict[str, Any]:
        mapping: dict[str, Any] = dict(self.flags)
        if self.args:
            mapping[ARGS_KEY] = list(self.args)
        if self.capture_output:
            mapping[CAPTURE_OUTPUT_KEYS[0]] = True
        return mapping


def _append_option(target: list[str], name: str, value: Scalar | None) -> None:
    # True and None mean a bare flag, False drops the flag.
    if value is False:
        return
    has_value = value is not None and value is not True
    if len(name) == 1:
        target.append(f"-{name}")
        if has_value:
            target.append(str(value))  # type: ignore[arg-type]
        return
    if has_value:
        target.append(f"--{name}={value}")
    else:
        target.append(f"--{name}")


def append_options(target: list[str], options: OptionInput) -> None:
    resolved = CommandOptions.coerce(options)
    for name, value in resolved.flags.items():
        if isinstance(value, list):
            for item in value:
                _append_option(target, name, item)
        else:
            _append_option(target, name, value)
    target.extend(resolved.args)


def translate_options(options: OptionInput) -> list[str]:
    tokens: list[str] = []
    append_options(tokens, options)
    return tokens


def parse_option_assignments(assignments: Iterable[str]) -> dict[str, OptionValue]:
    """Parse ``KEY`` / ``KEY=VALUE`` strings into an option mapping.

    A bare ``KEY`` becomes a value-less flag; repeating a key collects its
    values into a list in the order given.
    """
    parsed: dict[str, OptionValue] = {}
    for assignment in assignments:
        name, separator, value = str(assignment).partition("=")
        name = _validate_option_name(name.strip().lstrip("-"))
        item: Scalar | None = value if separator else None
        if name not in parsed:
            parsed[name] = item
            continue
        existing = parsed[name]
        if isinstance(existing, list):
            existing.append(item)  # type: ignore[arg-type]
        else:
            parsed[name] = [existing, item]  # type: ignore[list-item]
    return parsed
