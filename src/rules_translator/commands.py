"""Subcommand implementations for the rules-translator CLI."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    load_config,
    write_config_template,
)
from .core.logging import configure_logger, release_logger
from .errors import RulesTranslatorError, TranslatorConfigError
from .pipeline import BuildOptions, run_build
from .providers import describe_provider, iter_specs, load_providers
from .rules import parse_provider_list
from .scaffold import run_init

DEBUG_ENV = "RULES_TRANSLATOR_DEBUG"
LOGGER_NAME = "rules_translator"


def _stdout() -> Console:
    return Console(soft_wrap=True, highlight=False, markup=False)


def _stderr() -> Console:
    return Console(stderr=True, soft_wrap=True, highlight=False, markup=False)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rules-translator build",
        description=(
            "Translate markdown rule documents into agent-specific formats."
        ),
        epilog=(
            "Rules can opt in or out of providers with the "
            "_includeOnlyForProviders and _excludeForProviders front-matter "
            "keys (comma-separated provider ids)."
        ),
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Source directory containing rule files (default: agent-rules).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Base directory for provider outputs (default: current dir).",
    )
    parser.add_argument(
        "--filter",
        help='Glob for rule files relative to the input (default: "*.md").',
    )
    parser.add_argument(
        "--providers",
        help="Comma-separated built-in provider ids to run.",
    )
    parser.add_argument(
        "--provider",
        dest="custom",
        action="append",
        type=Path,
        metavar="PATH",
        help="Add a custom provider from a Python file (repeatable).",
    )
    parser.add_argument(
        "--no-builtin",
        dest="builtin",
        action="store_const",
        const=False,
        default=None,
        help="Skip built-in providers and run only custom ones.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Show what would be processed without writing anything.",
    )
    noise = parser.add_mutually_exclusive_group()
    noise.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Print step-by-step progress.",
    )
    noise.add_argument(
        "--quiet",
        action="store_true",
        default=None,
        help="Print only errors.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to a TOML config file (default: ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--log-level",
        help="Level for the JSON log file (default: INFO).",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Write JSON logs to this directory.",
    )
    return parser


def build_main(argv: Sequence[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv))

    overrides = ConfigOverrides(
        input_dir=args.input,
        output_dir=args.output,
        file_pattern=args.filter,
        provider_ids=(
            parse_provider_list(args.providers)
            if args.providers is not None
            else None
        ),
        builtin=args.builtin,
        custom_providers=args.custom,
        dry_run=args.dry_run,
        verbose=args.verbose,
        quiet=args.quiet,
        log_level=args.log_level,
        log_dir=args.log_dir,
    )

    try:
        config = load_config(config_path=args.config, overrides=overrides).config
    except TranslatorConfigError as exc:
        return _report_error(exc)

    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=config.log_dir,
        level=config.log_level,
        verbose=config.verbose,
    )
    try:
        providers = load_providers(
            output_dir=config.output_dir,
            provider_ids=config.provider_ids,
            builtin=config.builtin,
            custom_paths=config.custom_providers,
        )
        run_build(
            BuildOptions(
                providers=providers,
                input_dir=config.input_dir,
                file_pattern=config.file_pattern,
                dry_run=config.dry_run,
                verbose=config.verbose,
                quiet=config.quiet,
            ),
            logger=logger,
            console=_stdout(),
        )
    except Exception as exc:
        logger.error(
            "Build failed",
            exc_info=True,
            extra={"error": str(exc)},
        )
        return _report_error(exc)
    finally:
        release_logger(logger)
    return 0


def providers_main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="rules-translator providers",
        description="List the built-in providers.",
    )
    parser.parse_args(list(argv))

    specs = list(iter_specs())
    table = Table(title="Built-in Providers")
    table.add_column("ID", style="bold")
    table.add_column("Default")
    table.add_column("Output")
    table.add_column("Description")
    for spec in specs:
        table.add_row(
            spec.id,
            "yes" if spec.default else "no",
            spec.target,
            spec.summary,
        )
    console = _stdout()
    console.print(table)
    console.print(f"Total: {len(specs)} providers available")
    return 0


def validate_main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="rules-translator validate",
        description="Load a custom provider file and check its interface.",
    )
    parser.add_argument("path", type=Path, help="Python file to validate.")
    args = parser.parse_args(list(argv))

    try:
        description = describe_provider(args.path)
    except RulesTranslatorError as exc:
        err = _stderr()
        err.print("Provider validation failed:", style="red")
        err.print(f"   File: {args.path}")
        err.print(f"   Error: {exc}")
        return 1

    out = _stdout()
    out.print("Provider validation successful:", style="green")
    out.print(f"   File: {description.path}")
    out.print(f"   ID: {description.id}")
    out.print(f"   Class: {description.class_name}")
    out.print(f"   Methods: {', '.join(description.methods)}")
    return 0


def init_main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="rules-translator init",
        description="Create a rules directory seeded with example rules.",
    )
    parser.add_argument(
        "--rules-dir",
        type=Path,
        help="Directory for rule files (prompted when omitted).",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Accept the default answer for every prompt.",
    )
    args = parser.parse_args(list(argv))

    try:
        run_init(
            rules_dir=args.rules_dir,
            assume_yes=args.yes,
            console=_stdout(),
        )
    except OSError as exc:
        return _report_error(exc)
    return 0


def config_main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="rules-translator config",
        description="Manage rules-translator configuration files.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser(
        "init",
        help=f"Write the default {CONFIG_FILENAME} template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=f"Destination for the config (default: ./{CONFIG_FILENAME}).",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if it already exists.",
    )
    args = parser.parse_args(list(argv))

    target = args.path if args.path is not None else Path(CONFIG_FILENAME)
    target = target.expanduser()
    if not target.is_absolute():
        target = (Path.cwd() / target).resolve()
    try:
        written = write_config_template(target, overwrite=args.force)
    except TranslatorConfigError as exc:
        return _report_error(exc)

    _stdout().print(f"Wrote rules-translator config to {written}")
    return 0


def _report_error(exc: BaseException) -> int:
    err = _stderr()
    err.print(f"Error: {exc}", style="red")
    if os.environ.get(DEBUG_ENV):
        err.print_exception()
    return 1


__all__ = [
    "build_main",
    "config_main",
    "init_main",
    "providers_main",
    "validate_main",
]
