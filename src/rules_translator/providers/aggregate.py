"""Aggregate providers that combine every rule into one markdown file."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..core.files import remove_file_async, write_text_async
from ..rules import RuleFile, effective_front_matter, first_present

UNTITLED = "Untitled"


class AggregateProvider:
    """Collect ``## <heading>`` sections and write them out on ``finish``.

    Sections are rendered in filename order so the output does not depend on
    the order in which ``handle`` calls complete.
    """

    def __init__(self, provider_id: str, out_file: Path) -> None:
        self.id = provider_id
        self._out_file = Path(out_file).resolve()
        self._sections: List[Tuple[str, str]] = []

    @property
    def output_path(self) -> Path:
        return self._out_file

    async def init(self) -> None:
        self._sections = []
        await remove_file_async(self._out_file)

    async def handle(self, rule: RuleFile) -> None:
        self._sections.append((rule.filename, render_section(rule, self.id)))

    async def finish(self) -> None:
        await write_text_async(self._out_file, self.render())

    def render(self) -> str:
        ordered = sorted(self._sections, key=lambda item: item[0])
        body = "\n\n".join(section for _, section in ordered)
        return body.strip() + "\n"

    def __repr__(self) -> str:
        return (
            f"AggregateProvider(id={self.id!r}, "
            f"out_file={str(self._out_file)!r})"
        )


def section_heading(rule: RuleFile, provider_id: str) -> str:
    merged = effective_front_matter(rule.front_matter, provider_id)
    heading = first_present(merged, "title", "description")
    return UNTITLED if heading is None else str(heading)


def render_section(rule: RuleFile, provider_id: str) -> str:
    return f"## {section_heading(rule, provider_id)}\n\n{rule.content.strip()}"


def claude_provider(base_output_dir: Path | None = None) -> AggregateProvider:
    base = Path(base_output_dir) if base_output_dir else Path(".")
    return AggregateProvider("claude", base / "CLAUDE.md")


def openai_provider(base_output_dir: Path | None = None) -> AggregateProvider:
    # AGENTS.md is the shared instructions file read by OpenAI Codex.
    base = Path(base_output_dir) if base_output_dir else Path(".")
    return AggregateProvider("openai", base / "AGENTS.md")


def replit_provider(base_output_dir: Path | None = None) -> AggregateProvider:
    base = Path(base_output_dir) if base_output_dir else Path(".")
    return AggregateProvider("replit", base / "replit.md")


__all__ = [
    "UNTITLED",
    "AggregateProvider",
    "claude_provider",
    "openai_provider",
    "render_section",
    "replit_provider",
    "section_heading",
]
