"""Filesystem helpers used by the build pipeline and providers."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import List

__all__ = [
    "clear_directory",
    "discover_files",
    "read_text_file",
    "read_text_async",
    "remove_file_async",
    "reset_directory_async",
    "write_text_async",
    "write_text_file",
]


def discover_files(root: Path, pattern: str) -> List[str]:
    """Return sorted relative POSIX paths of files under ``root`` matching ``pattern``.

    Hidden files and anything below a hidden directory are skipped. ``**``
    also matches files at the top level of ``root``.
    """

    seen: set[str] = set()
    for candidate in root.glob(pattern):
        if not candidate.is_file():
            continue
        relative = candidate.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        seen.add(relative.as_posix())
    return sorted(seen)


def read_text_file(path: Path) -> str:
    """Read a text file as UTF-8."""
    with Path(path).open("r", encoding="utf-8") as fh:
        return fh.read()


def write_text_file(path: Path, text: str) -> Path:
    """Write ``text`` as UTF-8, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(text)
    return path


def clear_directory(directory: Path) -> None:
    """Remove every entry inside ``directory`` and leave it empty.

    A missing directory is created.
    """
    if directory.is_dir():
        for entry in list(directory.iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink(missing_ok=True)
    directory.mkdir(parents=True, exist_ok=True)


async def read_text_async(path: Path) -> str:
    return await asyncio.to_thread(read_text_file, path)


async def write_text_async(path: Path, text: str) -> Path:
    return await asyncio.to_thread(write_text_file, path, text)


async def reset_directory_async(directory: Path) -> None:
    await asyncio.to_thread(clear_directory, directory)


async def remove_file_async(path: Path) -> None:
    await asyncio.to_thread(path.unlink, missing_ok=True)
