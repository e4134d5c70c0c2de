"""Configuration loader for rules-translator runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Sequence

from .core import config as core_config
from .errors import TranslatorConfigError
from .rules import parse_provider_list

CONFIG_FILENAME = "rules_translator.toml"
CONFIG_ENV = "RULES_TRANSLATOR_CONFIG"
ENV_PREFIX = "RULES_TRANSLATOR_"
TEMPLATE_PACKAGE = "rules_translator"
TEMPLATE_FILENAME = "template.toml"

_DEFAULT_INPUT = "agent-rules"
_DEFAULT_FILTER = "*.md"
_DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class TranslatorConfig:
    """Fully resolved configuration for a build run."""

    input_dir: Path
    output_dir: Path
    file_pattern: str
    provider_ids: tuple[str, ...]
    builtin: bool
    custom_providers: tuple[Path, ...]
    dry_run: bool
    verbose: bool
    quiet: bool
    log_level: str
    log_dir: Optional[Path]


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    input_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    file_pattern: Optional[str] = None
    provider_ids: Optional[Sequence[str]] = None
    builtin: Optional[bool] = None
    custom_providers: Optional[Sequence[Path]] = None
    dry_run: Optional[bool] = None
    verbose: Optional[bool] = None
    quiet: Optional[bool] = None
    log_level: Optional[str] = None
    log_dir: Optional[Path] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved configuration plus the file it came from, if any."""

    config: TranslatorConfig
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML defaults.

    Relative paths from the config file resolve against the file's directory;
    relative CLI and environment paths resolve against ``cwd``.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env
    base_dir = (cwd or Path.cwd()).resolve()

    requested_path = _resolve_config_path(
        config_path=config_path, env_map=env_map, base_dir=base_dir
    )
    explicit = config_path is not None or _has_env_config(env_map)

    options = _default_table()
    loaded_path: Optional[Path] = None
    file_dir = base_dir
    if requested_path.exists():
        loaded_path = requested_path
        file_dir = requested_path.parent
        try:
            parsed = core_config.load_toml(requested_path)
            core_config.merge_defaults(options, parsed)
        except core_config.TomlConfigError as exc:
            raise TranslatorConfigError(str(exc)) from exc
    elif explicit:
        raise TranslatorConfigError(f"Config file not found: {requested_path}")

    paths = options["paths"]
    build = options["build"]
    logging_opts = options["logging"]

    input_dir = _pick_path(
        (overrides.input_dir, base_dir),
        (_parse_env_path(env_map, "INPUT"), base_dir),
        (_coerce_optional_path(paths["input"], "paths.input"), file_dir),
    )
    output_dir = _pick_path(
        (overrides.output_dir, base_dir),
        (_parse_env_path(env_map, "OUTPUT"), base_dir),
        (_coerce_optional_path(paths["output"], "paths.output"), file_dir),
    ) or base_dir
    log_dir = _pick_path(
        (overrides.log_dir, base_dir),
        (_parse_env_path(env_map, "LOG_DIR"), base_dir),
        (_coerce_optional_path(logging_opts["dir"], "logging.dir"), file_dir),
    )

    file_pattern = _require_string(
        _pick_first(
            overrides.file_pattern,
            _parse_env_string(env_map, "FILTER"),
            build["filter"],
        ),
        "build.filter",
    )

    provider_ids = _normalize_ids(
        _pick_first(
            overrides.provider_ids,
            _parse_env_ids(env_map),
            build["providers"],
        )
    )

    if overrides.custom_providers:
        custom_providers = tuple(
            _resolve_relative(path, base_dir)
            for path in overrides.custom_providers
        )
    else:
        custom_providers = tuple(
            _resolve_relative(path, file_dir)
            for path in _coerce_path_list(build["custom"], "build.custom")
        )

    log_level = _require_string(
        _pick_first(
            overrides.log_level,
            _parse_env_string(env_map, "LOG_LEVEL"),
            logging_opts["level"],
        ),
        "logging.level",
    ).upper()

    verbose = _require_bool(
        _pick_first(overrides.verbose, logging_opts["verbose"]),
        "logging.verbose",
    )
    quiet = _require_bool(
        _pick_first(overrides.quiet, logging_opts["quiet"]), "logging.quiet"
    )
    if verbose and quiet:
        raise TranslatorConfigError(
            "verbose and quiet output cannot both be enabled."
        )

    config = TranslatorConfig(
        input_dir=input_dir or (base_dir / _DEFAULT_INPUT),
        output_dir=output_dir,
        file_pattern=file_pattern,
        provider_ids=provider_ids,
        builtin=_require_bool(
            _pick_first(overrides.builtin, build["builtin"]), "build.builtin"
        ),
        custom_providers=custom_providers,
        dry_run=_require_bool(
            _pick_first(overrides.dry_run, build["dry_run"]), "build.dry_run"
        ),
        verbose=verbose,
        quiet=quiet,
        log_level=log_level,
        log_dir=log_dir,
    )
    return LoadResult(config=config, config_path=loaded_path)


def read_template() -> str:
    """Return the packaged configuration template."""

    try:
        return core_config.read_packaged_text(
            TEMPLATE_PACKAGE, TEMPLATE_FILENAME
        )
    except core_config.TomlConfigError as exc:  # pragma: no cover
        raise TranslatorConfigError(str(exc)) from exc


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the packaged template to ``path``."""

    try:
        return core_config.write_toml_template(
            path, template=read_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise TranslatorConfigError(str(exc)) from exc


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "paths": {"input": None, "output": None},
        "build": {
            "filter": _DEFAULT_FILTER,
            "providers": [],
            "builtin": True,
            "custom": [],
            "dry_run": False,
        },
        "logging": {
            "level": _DEFAULT_LOG_LEVEL,
            "verbose": False,
            "quiet": False,
            "dir": None,
        },
    }


def _resolve_config_path(
    *, config_path: Optional[Path], env_map: Mapping[str, str], base_dir: Path
) -> Path:
    if config_path is not None:
        return _resolve_relative(config_path, base_dir)
    env_candidate = _parse_env_string(env_map, "CONFIG")
    if env_candidate:
        return _resolve_relative(Path(env_candidate), base_dir)
    return base_dir / CONFIG_FILENAME


def _has_env_config(env_map: Mapping[str, str]) -> bool:
    return _parse_env_string(env_map, "CONFIG") is not None


def _resolve_relative(path: Path, base_dir: Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def _pick_path(*candidates: tuple[Optional[Path], Path]) -> Optional[Path]:
    for value, base_dir in candidates:
        if value is not None:
            return _resolve_relative(value, base_dir)
    return None


def _coerce_optional_path(value: object, key: str) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str):
        raw = value.strip()
        return Path(raw) if raw else None
    raise TranslatorConfigError(f"{key} must be a string when provided.")


def _coerce_path_list(value: object, key: str) -> list[Path]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise TranslatorConfigError(f"{key} must be a list of strings.")
    return [Path(item) for item in value if item.strip()]


def _normalize_ids(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        ids = parse_provider_list(value)
    elif isinstance(value, (list, tuple)):
        if not all(isinstance(item, str) for item in value):
            raise TranslatorConfigError(
                "build.providers must be a list of strings."
            )
        ids = parse_provider_list(list(value))
    else:
        raise TranslatorConfigError("build.providers must be a list of strings.")
    return tuple(dict.fromkeys(ids))


def _require_string(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TranslatorConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _require_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise TranslatorConfigError(f"{key} must be true or false.")
    return value


def _parse_env_ids(env_map: Mapping[str, str]) -> Optional[list[str]]:
    raw = _parse_env_string(env_map, "PROVIDERS")
    if raw is None:
        return None
    return parse_provider_list(raw) or None


def _parse_env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    return Path(raw)


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_ENV",
    "ConfigOverrides",
    "LoadResult",
    "TranslatorConfig",
    "load_config",
    "read_template",
    "write_config_template",
]
