"""Unified CLI entry point for rules-translator."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Iterable, Mapping, Optional, Sequence

CommandHandler = Callable[[Sequence[str]], int]

PROG = "rules-translator"
DEFAULT_COMMAND = "build"


@dataclass(frozen=True)
class CommandSpec:
    """Represents a rules-translator subcommand."""

    name: str
    summary: str
    handler: CommandHandler


def _command(func_name: str) -> CommandHandler:
    def _run(argv: Sequence[str]) -> int:
        module = import_module("rules_translator.commands")
        return _invoke(getattr(module, func_name), argv)

    return _run


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="build",
        summary="Translate rule documents for every selected provider.",
        handler=_command("build_main"),
    ),
    CommandSpec(
        name="providers",
        summary="List the built-in providers.",
        handler=_command("providers_main"),
    ),
    CommandSpec(
        name="validate",
        summary="Check that a custom provider file is usable.",
        handler=_command("validate_main"),
    ),
    CommandSpec(
        name="init",
        summary="Create a rules directory seeded with example rules.",
        handler=_command("init_main"),
    ),
    CommandSpec(
        name="config",
        summary="Manage the rules_translator.toml configuration file.",
        handler=_command("config_main"),
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def _sorted_specs() -> Iterable[CommandSpec]:
    return _COMMAND_SPECS


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _sorted_specs())
    lines = ["Available commands:"]
    for spec in _sorted_specs():
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}")
    return "\n".join(lines)


def format_usage() -> str:
    """Build the top-level usage banner with command listings."""

    parts = [
        f"Usage: {PROG} [<command>] [args...]",
        f"Without a command, `{PROG} [options]` runs `build`.",
        f"Run `{PROG} help <name>` or `{PROG} <name> --help` for details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], object]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version(PROG)
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0

    spec = COMMANDS.get(argv[0])
    if not spec:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2

    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `{PROG} {spec.name} --help` for CLI-specific options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        return COMMANDS[DEFAULT_COMMAND].handler([])

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0

    if head in ("-V", "--version", "version"):
        return _handle_version()

    if head == "list":
        _print(format_command_table())
        return 0

    if head == "help":
        return _handle_help(tail)

    if head.startswith("-"):
        return COMMANDS[DEFAULT_COMMAND].handler(args)

    spec = COMMANDS.get(head)
    if spec:
        return spec.handler(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _invoke(func: CommandHandler, argv: Sequence[str]) -> int:
    try:
        result = func(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)
    return result if isinstance(result, int) else 0


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
