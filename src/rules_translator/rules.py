"""Rule documents, routing directives and per-provider front-matter views."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Sequence, TypeVar

import frontmatter
import yaml

from .errors import RuleParseError

INCLUDE_DIRECTIVE = "_includeOnlyForProviders"
EXCLUDE_DIRECTIVE = "_excludeForProviders"
ROUTING_DIRECTIVES: tuple[str, ...] = (INCLUDE_DIRECTIVE, EXCLUDE_DIRECTIVE)

P = TypeVar("P")


@dataclass(frozen=True)
class RuleFile:
    """One parsed rule document as handed to providers."""

    filename: str
    front_matter: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    content: str = ""


def parse_front_matter(raw: str, *, source: str = "<string>") -> tuple[dict, str]:
    """Split ``raw`` into ``(front_matter, body)``.

    Documents without a front-matter block yield an empty mapping. Malformed
    YAML raises :class:`RuleParseError`.
    """

    try:
        post = frontmatter.loads(raw)
    except yaml.YAMLError as exc:
        raise RuleParseError(
            f"Invalid front-matter in {source}: {exc}"
        ) from exc
    return dict(post.metadata), post.content


def make_rule_file(
    filename: str, front_matter: Mapping[str, Any], content: str
) -> RuleFile:
    """Build the provider-facing rule with routing directives removed."""

    return RuleFile(
        filename=filename,
        front_matter=MappingProxyType(strip_directives(front_matter)),
        content=content,
    )


def parse_provider_list(value: object) -> List[str]:
    """Normalize a directive value into a list of provider ids.

    Strings are split on commas; sequences are taken item by item. Entries are
    trimmed and empty ones dropped. Anything else yields no ids.
    """

    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []
    ids: List[str] = []
    for item in items:
        if item is None:
            continue
        candidate = str(item).strip()
        if candidate:
            ids.append(candidate)
    return ids


def select_providers(
    providers: Sequence[P], front_matter: Mapping[str, Any]
) -> List[P]:
    """Return the providers that must process a rule with ``front_matter``.

    A non-empty include list is authoritative; otherwise the exclude list is
    subtracted. Unknown ids in either list are ignored.
    """

    include = set(parse_provider_list(front_matter.get(INCLUDE_DIRECTIVE)))
    if include:
        return [p for p in providers if _provider_id(p) in include]

    exclude = set(parse_provider_list(front_matter.get(EXCLUDE_DIRECTIVE)))
    if exclude:
        return [p for p in providers if _provider_id(p) not in exclude]

    return list(providers)


def strip_directives(front_matter: Mapping[str, Any]) -> dict:
    """Return a copy of ``front_matter`` without the routing directives."""

    return {
        key: value
        for key, value in front_matter.items()
        if key not in ROUTING_DIRECTIVES
    }


def effective_front_matter(
    front_matter: Mapping[str, Any], provider_id: str
) -> dict:
    """Overlay the ``provider_id`` sub-mapping onto the top-level keys."""

    merged = dict(front_matter)
    overrides = front_matter.get(provider_id)
    if isinstance(overrides, Mapping):
        merged.update(overrides)
    return merged


def first_present(mapping: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value under ``keys`` that is not ``None``."""

    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _provider_id(provider: object) -> str:
    return str(getattr(provider, "id", ""))


__all__ = [
    "INCLUDE_DIRECTIVE",
    "EXCLUDE_DIRECTIVE",
    "ROUTING_DIRECTIVES",
    "RuleFile",
    "effective_front_matter",
    "first_present",
    "parse_front_matter",
    "parse_provider_list",
    "make_rule_file",
    "select_providers",
    "strip_directives",
]
