"""TOML helpers behind ``rules_translator.toml`` loading and templating."""

from __future__ import annotations

import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "read_packaged_text",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """TOML file could not be read, parsed or matched against the defaults."""


def load_toml(path: Path) -> dict[str, Any]:
    if path.is_dir():
        raise TomlConfigError(f"Config path is a directory: {path}")
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Copy ``override`` into ``base`` in place.

    ``base`` defines the schema: every key in ``override`` must exist there,
    and a key is a table in one exactly when it is a table in the other.
    """

    for key, value in override.items():
        where = path + key
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{where}'.")
        wants_table = isinstance(base[key], MutableMapping)
        is_table = isinstance(value, Mapping)
        if wants_table and not is_table:
            raise TomlConfigError(
                f"Expected table for '{where}', found {type(value).__name__}."
            )
        if is_table and not wants_table:
            raise TomlConfigError(
                f"Expected a value for '{where}', found a table."
            )
        if wants_table:
            merge_defaults(base[key], value, path=f"{where}.")
        else:
            base[key] = value


def read_packaged_text(package: str, filename: str) -> str:
    resource = resources.files(package) / filename
    if not resource.is_file():  # pragma: no cover - broken install
        raise TomlConfigError(f"Packaged resource '{filename}' not found in {package}.")
    return resource.read_text(encoding="utf-8")


def write_toml_template(
    path: Path, *, template: str, overwrite: bool = False
) -> Path:
    """Write ``template`` to ``path``; an existing file needs ``overwrite``."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    return path
