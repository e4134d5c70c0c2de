"""Core shared helpers for rules-translator."""

from __future__ import annotations

from .config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    read_packaged_text,
    write_toml_template,
)
from .files import (
    clear_directory,
    discover_files,
    read_text_async,
    read_text_file,
    remove_file_async,
    reset_directory_async,
    write_text_async,
    write_text_file,
)
from .logging import JsonLogFormatter, configure_logger, release_logger

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "read_packaged_text",
    "write_toml_template",
    "clear_directory",
    "discover_files",
    "read_text_async",
    "read_text_file",
    "remove_file_async",
    "reset_directory_async",
    "write_text_async",
    "write_text_file",
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]
