"""Built-in output providers and the custom provider loader."""

from __future__ import annotations

from .aggregate import AggregateProvider
from .base import RuleProvider, call_lifecycle
from .cursor import CursorProvider
from .loader import (
    ProviderDescription,
    describe_provider,
    load_custom_provider,
    load_providers,
    validate_provider,
)
from .mirror import MirrorProvider
from .registry import (
    BUILTIN_PROVIDERS,
    ProviderSpec,
    builtin_providers,
    default_ids,
    iter_specs,
)

__all__ = [
    "AggregateProvider",
    "CursorProvider",
    "MirrorProvider",
    "RuleProvider",
    "call_lifecycle",
    "ProviderDescription",
    "describe_provider",
    "load_custom_provider",
    "load_providers",
    "validate_provider",
    "BUILTIN_PROVIDERS",
    "ProviderSpec",
    "builtin_providers",
    "default_ids",
    "iter_specs",
]
