"""Per-file rewrite provider producing Cursor ``.mdc`` rules."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any

import frontmatter
import yaml
from frontmatter import Post
from frontmatter.default_handlers import YAMLHandler

from ..core.files import reset_directory_async, write_text_async
from ..rules import RuleFile, effective_front_matter

RETRIEVAL_STRATEGY = "retrieval-strategy"
_LEADING_KEYS = ("description", "globs", "alwaysApply")


class StableYAMLHandler(YAMLHandler):
    """Front-matter YAML handler preserving key order."""

    def export(self, metadata: dict[str, object], **kwargs: object) -> str:
        return yaml.safe_dump(
            metadata,
            sort_keys=False,
            width=1000,
            default_flow_style=False,
            allow_unicode=True,
        ).rstrip()


_HANDLER = StableYAMLHandler()


class CursorProvider:
    """Write one ``.mdc`` file per rule under ``.cursor/rules``.

    Overrides under a ``cursor:`` key win over top-level keys. A rule with
    ``alwaysApply: true`` and no explicit ``retrieval-strategy`` gets
    ``retrieval-strategy: always``.
    """

    id = "cursor"

    def __init__(self, base_output_dir: Path | None = None) -> None:
        base = Path(base_output_dir) if base_output_dir else Path(".")
        self._out_dir = (base / ".cursor" / "rules").resolve()

    @property
    def output_path(self) -> Path:
        return self._out_dir

    async def init(self) -> None:
        await reset_directory_async(self._out_dir)

    async def handle(self, rule: RuleFile) -> None:
        target = self._out_dir / _mdc_name(rule.filename)
        metadata = build_cursor_front_matter(
            rule.front_matter, rule.filename, provider_id=self.id
        )
        post = Post(rule.content)
        post.metadata.update(metadata)
        await write_text_async(
            target, frontmatter.dumps(post, handler=_HANDLER) + "\n"
        )

    async def finish(self) -> None:
        return None


def build_cursor_front_matter(
    front_matter: Any, filename: str, *, provider_id: str = "cursor"
) -> dict[str, Any]:
    """Return the ordered front-matter written to a Cursor rule."""

    merged = effective_front_matter(front_matter, provider_id)

    strategy = merged.get(RETRIEVAL_STRATEGY)
    if strategy is None and merged.get("alwaysApply"):
        strategy = "always"

    output: dict[str, Any] = {
        "description": _default(
            merged.get("description"), PurePosixPath(filename).stem
        ),
        "globs": _default(merged.get("globs"), []),
        "alwaysApply": _default(merged.get("alwaysApply"), False),
    }
    for key, value in merged.items():
        if key in _LEADING_KEYS or key in (provider_id, RETRIEVAL_STRATEGY):
            continue
        output[key] = value

    if strategy is not None:
        output[RETRIEVAL_STRATEGY] = strategy
    return output


def _mdc_name(filename: str) -> str:
    path = PurePosixPath(filename)
    if path.suffix == ".md":
        path = path.with_suffix(".mdc")
    return str(path)


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


__all__ = ["CursorProvider", "StableYAMLHandler", "build_cursor_front_matter"]
