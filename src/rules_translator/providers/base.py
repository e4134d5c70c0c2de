"""Provider interface shared by built-in and custom providers."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Protocol, runtime_checkable

from ..rules import RuleFile

LIFECYCLE_METHODS: tuple[str, ...] = ("init", "handle", "finish")


@runtime_checkable
class RuleProvider(Protocol):
    """Converts rule documents into one agent-specific output target.

    ``init`` runs once before any ``handle`` call, ``finish`` once after the
    last. Implementations may be coroutine functions or plain callables.
    """

    id: str

    def init(self) -> Awaitable[None] | None: ...

    def handle(self, rule: RuleFile) -> Awaitable[None] | None: ...

    def finish(self) -> Awaitable[None] | None: ...


async def call_lifecycle(provider: Any, method: str, *args: Any) -> None:
    """Invoke ``provider.<method>`` and await the result when needed."""

    result = getattr(provider, method)(*args)
    if inspect.isawaitable(result):
        await result


__all__ = ["LIFECYCLE_METHODS", "RuleProvider", "call_lifecycle"]
