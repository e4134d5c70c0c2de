"""Translate markdown agent rules into provider-specific formats."""

from __future__ import annotations

from .config import (
    ConfigOverrides,
    LoadResult,
    TranslatorConfig,
    load_config,
)
from .errors import (
    InputDirectoryError,
    ProviderLoadError,
    ProviderValidationError,
    RuleParseError,
    RulesTranslatorError,
    TranslatorConfigError,
    UnknownProviderError,
)
from .pipeline import BuildOptions, build_rules, discover_rule_files, run_build
from .rules import (
    RuleFile,
    effective_front_matter,
    parse_front_matter,
    parse_provider_list,
    select_providers,
    strip_directives,
)

__all__ = [
    "ConfigOverrides",
    "LoadResult",
    "TranslatorConfig",
    "load_config",
    "InputDirectoryError",
    "ProviderLoadError",
    "ProviderValidationError",
    "RuleParseError",
    "RulesTranslatorError",
    "TranslatorConfigError",
    "UnknownProviderError",
    "BuildOptions",
    "build_rules",
    "discover_rule_files",
    "run_build",
    "RuleFile",
    "effective_front_matter",
    "parse_front_matter",
    "parse_provider_list",
    "select_providers",
    "strip_directives",
]
