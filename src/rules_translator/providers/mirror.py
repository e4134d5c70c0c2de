"""Directory-mirror providers that copy rule bodies without front-matter."""

from __future__ import annotations

from pathlib import Path

from ..core.files import reset_directory_async, write_text_async
from ..rules import RuleFile


class MirrorProvider:
    """Write each rule body under the same relative name in ``out_dir``."""

    def __init__(self, provider_id: str, out_dir: Path) -> None:
        self.id = provider_id
        self._out_dir = Path(out_dir).resolve()

    @property
    def output_path(self) -> Path:
        return self._out_dir

    async def init(self) -> None:
        await reset_directory_async(self._out_dir)

    async def handle(self, rule: RuleFile) -> None:
        await write_text_async(
            self._out_dir / rule.filename, rule.content.lstrip() + "\n"
        )

    async def finish(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"MirrorProvider(id={self.id!r}, out_dir={str(self._out_dir)!r})"


def cline_provider(base_output_dir: Path | None = None) -> MirrorProvider:
    base = Path(base_output_dir) if base_output_dir else Path(".")
    return MirrorProvider("cline", base / ".clinerules")


def windsurf_provider(base_output_dir: Path | None = None) -> MirrorProvider:
    base = Path(base_output_dir) if base_output_dir else Path(".")
    return MirrorProvider("windsurf", base / ".windsurf" / "rules")


__all__ = ["MirrorProvider", "cline_provider", "windsurf_provider"]
