"""Interactive workspace initialisation for rules-translator."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

BUNDLED_PACKAGE = "rules_translator"
BUNDLED_DIRNAME = "bundled_rules"
DEFAULT_RULES_DIRNAME = "agent-rules"


@dataclass(frozen=True)
class InitResult:
    """Outcome of an init run."""

    rules_dir: Path
    copied: tuple[str, ...] = ()
    message: str = ""


def bundled_rules_root() -> Traversable:
    return resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_DIRNAME)


def iter_bundled_rules(
    root: Optional[Traversable] = None, prefix: str = ""
) -> Iterator[tuple[str, Traversable]]:
    """Yield ``(relative_name, resource)`` pairs for bundled markdown rules."""

    node = root if root is not None else bundled_rules_root()
    if not node.is_dir():
        return
    for entry in sorted(node.iterdir(), key=lambda item: item.name):
        name = f"{prefix}{entry.name}"
        if entry.is_dir():
            yield from iter_bundled_rules(entry, prefix=f"{name}/")
        elif entry.name.endswith(".md"):
            yield name, entry


def copy_bundled_rules(target: Path) -> tuple[str, ...]:
    """Copy every bundled rule into ``target``, overwriting same-named files."""

    copied: list[str] = []
    for name, resource in iter_bundled_rules():
        destination = target / name
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(
            resource.read_text(encoding="utf-8"), encoding="utf-8"
        )
        copied.append(name)
    return tuple(copied)


def run_init(
    *,
    rules_dir: Optional[Path] = None,
    assume_yes: bool = False,
    cwd: Optional[Path] = None,
    console: Optional[Console] = None,
) -> InitResult:
    """Create a rules directory and optionally seed it with bundled rules.

    ``assume_yes`` accepts the default answer for every prompt, which never
    overwrites a non-empty directory.
    """

    out = console or Console(soft_wrap=True, highlight=False)
    base = (cwd or Path.cwd()).resolve()
    default_dir = base / DEFAULT_RULES_DIRNAME

    out.print("\nrules-translator initialization\n", style="bold", markup=False)

    if rules_dir is None:
        if assume_yes:
            target = default_dir
        else:
            answer = Prompt.ask(
                "Where should your rules live?",
                default=str(default_dir),
                console=out,
            )
            target = Path(answer)
    else:
        target = rules_dir
    target = target.expanduser()
    if not target.is_absolute():
        target = base / target
    target = target.resolve()

    had_entries = target.is_dir() and any(target.iterdir())
    target.mkdir(parents=True, exist_ok=True)

    if not any(True for _ in iter_bundled_rules()):
        return _finish(out, target, (), "No bundled rules found to copy.")

    copy = assume_yes or Confirm.ask(
        "Copy pre-bundled example rules into your workspace?",
        default=True,
        console=out,
    )
    if not copy:
        return _finish(out, target, (), "Skipped copying bundled rules.")

    if had_entries:
        overwrite = (not assume_yes) and Confirm.ask(
            f"The target directory '{target}' is not empty. "
            "Overwrite conflicting files?",
            default=False,
            console=out,
        )
        if not overwrite:
            return _finish(out, target, (), "Skipped copying bundled rules.")

    copied = copy_bundled_rules(target)
    return _finish(
        out, target, copied, f"Copied bundled rules into '{target}'."
    )


def _finish(
    out: Console, target: Path, copied: tuple[str, ...], message: str
) -> InitResult:
    out.print(message, markup=False)
    out.print(
        "\nInitialization complete. You can now run:\n"
        f"   rules-translator --input {target}\n",
        markup=False,
    )
    return InitResult(rules_dir=target, copied=copied, message=message)


__all__ = [
    "InitResult",
    "bundled_rules_root",
    "copy_bundled_rules",
    "iter_bundled_rules",
    "run_init",
]
