from __future__ import annotations

"""
Typed observability primitives for handler lifecycle events.
"""

from dataclasses import dataclass
from typing import Awaitable, Literal, Protocol

from .types import ProviderKind, Usage


LLMLifecycleEventType = Literal[
    "request_start",
    "request_success",
    "request_error",
    "stream_event",
    "cancel",
]


@dataclass(frozen=True, slots=True)
class LLMLifecycleEvent:
    """
    One lifecycle event emitted by `UnifiedHandler`.

    Observer callbacks are best-effort only; failures are swallowed.
    """

    event_type: LLMLifecycleEventType
    request_id: str
    provider: ProviderKind
    model: str | None = None
    latency_ms: float | None = None
    usage: Usage | None = None
    stream_event_type: str | None = None
    error_class: str | None = None
    error_message: str | None = None


class LLMObserver(Protocol):
    """Observer callback protocol used by the handler."""

    def __call__(self, event: LLMLifecycleEvent) -> None | Awaitable[None]:
        ...

