"""Registry of built-in providers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from ..errors import UnknownProviderError
from .aggregate import claude_provider, openai_provider, replit_provider
from .base import RuleProvider
from .cursor import CursorProvider
from .mirror import cline_provider, windsurf_provider

ProviderFactory = Callable[[Optional[Path]], RuleProvider]


@dataclass(frozen=True)
class ProviderSpec:
    """Describes a built-in provider and how to construct it."""

    id: str
    summary: str
    target: str
    factory: ProviderFactory
    default: bool = False

    def create(self, base_output_dir: Optional[Path] = None) -> RuleProvider:
        return self.factory(base_output_dir)


_PROVIDER_SPECS: Sequence[ProviderSpec] = (
    ProviderSpec(
        id="cursor",
        summary="Cursor rules with repackaged front-matter.",
        target=".cursor/rules/*.mdc",
        factory=CursorProvider,
        default=True,
    ),
    ProviderSpec(
        id="cline",
        summary="Cline rules mirrored without front-matter.",
        target=".clinerules/",
        factory=cline_provider,
        default=True,
    ),
    ProviderSpec(
        id="claude",
        summary="Single CLAUDE.md digest of every rule.",
        target="CLAUDE.md",
        factory=claude_provider,
        default=True,
    ),
    ProviderSpec(
        id="windsurf",
        summary="Windsurf rules mirrored without front-matter.",
        target=".windsurf/rules/",
        factory=windsurf_provider,
    ),
    ProviderSpec(
        id="openai",
        summary="Single AGENTS.md digest for OpenAI Codex.",
        target="AGENTS.md",
        factory=openai_provider,
    ),
    ProviderSpec(
        id="replit",
        summary="Single replit.md digest of every rule.",
        target="replit.md",
        factory=replit_provider,
    ),
)

BUILTIN_PROVIDERS: Mapping[str, ProviderSpec] = {
    spec.id: spec for spec in _PROVIDER_SPECS
}


def iter_specs() -> Iterable[ProviderSpec]:
    return _PROVIDER_SPECS


def default_ids() -> tuple[str, ...]:
    return tuple(spec.id for spec in _PROVIDER_SPECS if spec.default)


def builtin_providers(
    base_output_dir: Optional[Path] = None,
    ids: Optional[Sequence[str]] = None,
) -> List[RuleProvider]:
    """Instantiate the requested built-in providers.

    ``ids`` keeps the caller's order; an empty or missing list selects the
    default set. Unknown ids raise :class:`UnknownProviderError`.
    """

    requested = list(ids) if ids else list(default_ids())
    providers: List[RuleProvider] = []
    seen: set[str] = set()
    for provider_id in requested:
        spec = BUILTIN_PROVIDERS.get(provider_id)
        if spec is None:
            available = ", ".join(BUILTIN_PROVIDERS)
            raise UnknownProviderError(
                f"Unknown provider ID: {provider_id}. "
                f"Available providers: {available}"
            )
        if provider_id in seen:
            continue
        seen.add(provider_id)
        providers.append(spec.create(base_output_dir))
    return providers


__all__ = [
    "BUILTIN_PROVIDERS",
    "ProviderFactory",
    "ProviderSpec",
    "builtin_providers",
    "default_ids",
    "iter_specs",
]
