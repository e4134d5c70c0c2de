from __future__ import annotations

import asyncio
from pathlib import Path

from rules_translator.core import files


def _touch(path: Path, text: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_discover_files_top_level_pattern(tmp_path: Path) -> None:
    _touch(tmp_path / "b.md")
    _touch(tmp_path / "a.md")
    _touch(tmp_path / "notes.txt")
    _touch(tmp_path / "sub" / "c.md")
    (tmp_path / "dir.md").mkdir()

    assert files.discover_files(tmp_path, "*.md") == ["a.md", "b.md"]


def test_discover_files_recursive_includes_top_level(tmp_path: Path) -> None:
    _touch(tmp_path / "a.md")
    _touch(tmp_path / "sub" / "deeper" / "c.md")

    assert files.discover_files(tmp_path, "**/*.md") == [
        "a.md",
        "sub/deeper/c.md",
    ]


def test_discover_files_skips_hidden_entries(tmp_path: Path) -> None:
    _touch(tmp_path / ".secret.md")
    _touch(tmp_path / ".git" / "x.md")
    _touch(tmp_path / "visible.md")

    assert files.discover_files(tmp_path, "**/*.md") == ["visible.md"]


def test_discover_files_missing_root_returns_nothing(tmp_path: Path) -> None:
    assert files.discover_files(tmp_path / "missing", "*.md") == []


def test_write_text_file_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "c.md"

    files.write_text_file(target, "héllo\n")

    assert files.read_text_file(target) == "héllo\n"


def test_clear_directory_empties_and_creates(tmp_path: Path) -> None:
    target = tmp_path / "out"
    _touch(target / "one.md")
    _touch(target / "nested" / "two.md")

    files.clear_directory(target)
    assert target.is_dir()
    assert list(target.iterdir()) == []

    fresh = tmp_path / "fresh" / "dir"
    files.clear_directory(fresh)
    assert fresh.is_dir()


def test_async_wrappers(tmp_path: Path) -> None:
    target = tmp_path / "dir" / "file.md"

    async def _go() -> str:
        await files.write_text_async(target, "body")
        text = await files.read_text_async(target)
        await files.remove_file_async(target)
        await files.remove_file_async(target)
        await files.reset_directory_async(tmp_path / "dir")
        return text

    assert asyncio.run(_go()) == "body"
    assert not target.exists()
    assert (tmp_path / "dir").is_dir()
