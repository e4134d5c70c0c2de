"""Build pipeline: discover rules, route them and drive provider lifecycles."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .core.files import discover_files, read_text_async
from .errors import InputDirectoryError, RuleParseError
from .providers.base import RuleProvider, call_lifecycle
from .rules import make_rule_file, parse_front_matter, select_providers

DEFAULT_PATTERN = "*.md"

_LOGGER_NAME = "rules_translator.pipeline"


@dataclass(frozen=True)
class BuildOptions:
    """Inputs for a single build run."""

    providers: Sequence[RuleProvider]
    input_dir: Path
    file_pattern: str = DEFAULT_PATTERN
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False


class _Reporter:
    def __init__(
        self, console: Console, *, verbose: bool, quiet: bool
    ) -> None:
        self._console = console
        self.verbose = verbose and not quiet
        self.quiet = quiet

    def info(self, message: str, style: Optional[str] = None) -> None:
        if not self.quiet:
            self._console.print(message, style=style)

    def step(self, message: str) -> None:
        if self.verbose:
            self._console.print(message, style="dim")

    def always(self, message: str, style: Optional[str] = None) -> None:
        self._console.print(message, style=style)


def discover_rule_files(input_dir: Path, pattern: str) -> tuple[str, ...]:
    """Return relative rule paths under ``input_dir`` matching ``pattern``."""

    if not input_dir.is_dir():
        raise InputDirectoryError(f"Source directory not found: {input_dir}")
    return tuple(discover_files(input_dir, pattern))


async def build_rules(
    options: BuildOptions,
    *,
    logger: Optional[logging.Logger] = None,
    console: Optional[Console] = None,
) -> None:
    """Translate every matching rule file through ``options.providers``.

    Providers are initialised together, each file is dispatched to the
    providers its routing directives select, and every initialised provider
    is finished once. Any provider failure aborts the run.
    """

    log = logger or logging.getLogger(_LOGGER_NAME)
    out = _Reporter(
        console or _default_console(),
        verbose=options.verbose,
        quiet=options.quiet,
    )
    providers = list(options.providers)
    source_dir = Path(options.input_dir).expanduser().resolve()
    provider_ids = [p.id for p in providers]

    out.info(f"Scanning for files in: {source_dir}")
    out.info(f"Pattern: {options.file_pattern}")
    out.info(f"Providers: {', '.join(provider_ids)}")
    log.info(
        "Starting build",
        extra={
            "input_dir": str(source_dir),
            "pattern": options.file_pattern,
            "providers": provider_ids,
            "dry_run": options.dry_run,
        },
    )

    files = discover_rule_files(source_dir, options.file_pattern)
    log.info("Discovered rule files", extra={"file_count": len(files)})

    if files:
        if out.verbose:
            out.info(f"Found {len(files)} files: {', '.join(files)}")
        else:
            out.info(f"Found {len(files)} files to process")

    if options.dry_run:
        _print_plan(out, providers, files)
        log.info("Dry run complete", extra={"file_count": len(files)})
        return

    if not files:
        out.info(
            f"No files found matching pattern: {options.file_pattern}",
            style="yellow",
        )
        log.info("No rule files matched", extra={"pattern": options.file_pattern})
        return

    out.step("Initializing providers...")
    await asyncio.gather(
        *(_run_lifecycle(p, "init", out, log) for p in providers)
    )

    out.info("Processing files...")
    for filename in files:
        await _process_file(source_dir, filename, providers, out, log)

    out.step("Finalizing providers...")
    await asyncio.gather(
        *(_run_lifecycle(p, "finish", out, log) for p in providers)
    )

    out.info("Build completed successfully!", style="green")
    log.info(
        "Completed build",
        extra={"file_count": len(files), "providers": provider_ids},
    )


def run_build(
    options: BuildOptions,
    *,
    logger: Optional[logging.Logger] = None,
    console: Optional[Console] = None,
) -> None:
    """Synchronous wrapper around :func:`build_rules`."""

    asyncio.run(build_rules(options, logger=logger, console=console))


async def _process_file(
    source_dir: Path,
    filename: str,
    providers: Sequence[RuleProvider],
    out: _Reporter,
    log: logging.Logger,
) -> None:
    out.step(f"  Processing: {filename}")
    try:
        raw = await read_text_async(source_dir / filename)
    except UnicodeDecodeError as exc:
        raise RuleParseError(f"Cannot decode {filename} as UTF-8: {exc}") from exc
    front_matter, content = parse_front_matter(raw, source=filename)
    targets = select_providers(providers, front_matter)
    rule = make_rule_file(filename, front_matter, content)

    log.debug(
        "Dispatching rule",
        extra={"file": filename, "providers": [p.id for p in targets]},
    )

    async def _handle(provider: RuleProvider) -> None:
        out.step(f"    {provider.id}: {filename}")
        await call_lifecycle(provider, "handle", rule)

    await asyncio.gather(*(_handle(p) for p in targets))


async def _run_lifecycle(
    provider: RuleProvider,
    method: str,
    out: _Reporter,
    log: logging.Logger,
) -> None:
    label = "Initializing" if method == "init" else "Finalizing"
    out.step(f"  {label} {provider.id}...")
    log.debug(
        "Provider lifecycle", extra={"provider": provider.id, "stage": method}
    )
    await call_lifecycle(provider, method)


def _print_plan(
    out: _Reporter, providers: Sequence[RuleProvider], files: Sequence[str]
) -> None:
    out.always("")
    out.always("DRY RUN - No files will be modified", style="bold")
    out.always("")
    for provider in providers:
        out.always(f"Provider: {provider.id} ({type(provider).__name__})")
        for filename in files:
            out.always(f"  Would process: {filename}")


def _default_console() -> Console:
    return Console(soft_wrap=True, highlight=False, markup=False)


__all__ = [
    "DEFAULT_PATTERN",
    "BuildOptions",
    "build_rules",
    "discover_rule_files",
    "run_build",
]
