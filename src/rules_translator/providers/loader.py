"""Assemble the active provider list from built-ins and custom modules."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional, Sequence

from ..errors import ProviderLoadError, ProviderValidationError
from .base import LIFECYCLE_METHODS, RuleProvider
from .registry import builtin_providers


@dataclass(frozen=True)
class ProviderDescription:
    """Summary of a validated custom provider."""

    path: Path
    id: str
    class_name: str
    methods: tuple[str, ...]


def validate_provider(provider: Any, source: str = "provider") -> RuleProvider:
    """Check that ``provider`` exposes ``id``, ``init``, ``handle``, ``finish``."""

    if provider is None or inspect.isclass(provider) or inspect.ismodule(provider):
        raise ProviderValidationError(
            f"{source}: Provider must be an object instance"
        )
    provider_id = getattr(provider, "id", None)
    if not isinstance(provider_id, str) or not provider_id.strip():
        raise ProviderValidationError(
            f"{source}: Provider must have a non-empty string 'id' property"
        )
    for method in LIFECYCLE_METHODS:
        if not callable(getattr(provider, method, None)):
            raise ProviderValidationError(
                f"{source}: Provider must have a '{method}' method"
            )
    return provider


def load_custom_provider(path: Path) -> RuleProvider:
    """Import ``path`` as a module and return the provider it defines.

    The module may expose a ``provider`` object, a ``Provider`` class or
    instance, or exactly one class whose name ends with ``Provider``.
    """

    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise ProviderLoadError(f"Provider file not found: {path}")

    module = _import_file(resolved)
    candidate = _find_candidate(module, path)
    if inspect.isclass(candidate):
        try:
            candidate = candidate()
        except Exception as exc:
            raise ProviderLoadError(
                f"Failed to instantiate provider from {path}: {exc}"
            ) from exc
    return validate_provider(candidate, str(path))


def describe_provider(path: Path) -> ProviderDescription:
    provider = load_custom_provider(path)
    return ProviderDescription(
        path=Path(path),
        id=provider.id,
        class_name=type(provider).__name__,
        methods=LIFECYCLE_METHODS,
    )


def load_providers(
    *,
    output_dir: Optional[Path] = None,
    provider_ids: Sequence[str] = (),
    builtin: bool = True,
    custom_paths: Sequence[Path] = (),
) -> List[RuleProvider]:
    """Return the ordered provider list for one run.

    Built-ins come first (filtered by ``provider_ids``), then custom providers
    in the order given. Duplicate ids and an empty selection are errors.
    """

    providers: List[RuleProvider] = []
    if builtin:
        providers.extend(builtin_providers(output_dir, provider_ids))

    for custom_path in custom_paths:
        try:
            provider = load_custom_provider(custom_path)
        except ProviderLoadError as exc:
            raise ProviderLoadError(
                f"Failed to load custom provider '{custom_path}': {exc}"
            ) from exc
        existing = {p.id for p in providers}
        if provider.id in existing:
            raise ProviderLoadError(
                f"Provider ID conflict: '{provider.id}' is already used by "
                "another provider"
            )
        providers.append(provider)

    if not providers:
        raise ProviderLoadError(
            "No providers specified. Use built-in providers or add custom "
            "providers with --provider."
        )
    return providers


def _import_file(path: Path) -> ModuleType:
    module_name = f"rules_translator_custom_{path.stem}_{abs(hash(path))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ProviderLoadError(
            f"Failed to load provider from {path}: not an importable module"
        )
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise ProviderLoadError(
            f"Failed to load provider from {path}: {exc}"
        ) from exc
    return module


def _find_candidate(module: ModuleType, source: Path) -> Any:
    for attribute in ("provider", "Provider"):
        value = getattr(module, attribute, None)
        if value is not None:
            return value

    classes = [
        (name, value)
        for name, value in vars(module).items()
        if inspect.isclass(value)
        and value.__module__ == module.__name__
        and name.endswith("Provider")
    ]
    if not classes:
        raise ProviderLoadError(
            f"No provider class found in {source}. Expected a class named "
            "*Provider or a module-level 'provider' object."
        )
    if len(classes) > 1:
        names = ", ".join(name for name, _ in classes)
        raise ProviderLoadError(
            f"Multiple provider classes found in {source}: {names}. "
            "Define only one provider class or expose 'provider'."
        )
    return classes[0][1]


__all__ = [
    "ProviderDescription",
    "describe_provider",
    "load_custom_provider",
    "load_providers",
    "validate_provider",
]
