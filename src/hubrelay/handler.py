from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.
"""

import asyncio
import inspect
import time
from contextlib import aclosing
from typing import Any, AsyncIterator, Awaitable, Iterable, Mapping, cast

from .clients.base import ProviderAdapter
from .config import HubConfig
from .errors import LLMConfigurationError
from .factory import create_adapter
from .observability import LLMLifecycleEvent, LLMObserver
from .routing import select_provider
from .sanitize import fix_tool_choice
from .streaming import normalize
from .types import (
    ModelDescriptor,
    ModelInfo,
    NormalizedStreamEvent,
    ProviderKind,
    StreamDoneEvent,
    StreamUsageEvent,
    Usage,
)
from .utils import new_request_id
from .validation import validate_request_body

DEFAULT_MODEL_DESCRIPTION = "Aihubmix unified model provider"


class UnifiedHandler:
    """
    One entry point for Anthropic-, OpenAI- and Gemini-style models behind a
    single gateway.

    The provider is picked once from the configured model id and stays bound
    for the lifetime of the instance; build a new handler to switch models.

    Public methods:
      - get_model
      - stream (normalized events for an OpenAI-chat-shaped body)
      - create_message (system prompt + messages convenience wrapper)
    """

    def __init__(
        self,
        config: HubConfig | Mapping[str, Any] | None = None,
        *,
        observers: list[LLMObserver] | None = None,
        **overrides: Any,
    ) -> None:
        """
        Create a handler.

        `config` may be a `HubConfig`, a settings mapping (snake_case or
        camelCase keys) or omitted; keyword overrides win over both.
        Raises `LLMConfigurationError` when no API key is given.
        """
        self.config = self._resolve_config(config, overrides)
        if not isinstance(self.config.api_key, str) or not self.config.api_key.strip():
            raise LLMConfigurationError("API key is required")

        self._provider = select_provider(self.config.model_id)
        self._adapter = create_adapter(self._provider, self.config)
        self._model = ModelDescriptor(
            id=self.config.model_id,
            info=ModelInfo(
                description=DEFAULT_MODEL_DESCRIPTION,
                provider=self._provider,
                max_tokens=self.config.max_tokens,
            ),
        )
        self._observers = list(observers or [])

    @classmethod
    def from_env(cls, *, observers: list[LLMObserver] | None = None) -> "UnifiedHandler":
        """Build a handler from `HUBRELAY_*` environment variables."""
        return cls(HubConfig.from_env(), observers=observers)

    @property
    def provider(self) -> ProviderKind:
        return self._provider

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    def get_model(self) -> ModelDescriptor:
        """Model bound at construction; routing is not re-run."""
        return self._model

    def create_message(
        self,
        system_prompt: str,
        messages: Iterable[Mapping[str, Any]],
        tools: Iterable[Mapping[str, Any]] | None = None,
    ) -> AsyncIterator[NormalizedStreamEvent]:
        """Stream a reply to `messages` under `system_prompt`."""
        body: dict[str, Any] = {
            "model": self.config.model_id,
            "messages": [dict(m) for m in messages],
        }
        if system_prompt:
            body["system"] = system_prompt
        if tools is not None:
            body["tools"] = [dict(t) for t in tools]
            body["tool_choice"] = "auto"
        return self.stream(body)

    async def stream(self, body: Mapping[str, Any]) -> AsyncIterator[NormalizedStreamEvent]:
        """
        Sanitize `body`, send it through the bound adapter and yield normalized
        events.

        Provider errors propagate unchanged. Leaving the loop early (or
        cancelling the consuming task) closes the upstream stream.
        """
        request = dict(body)
        request.setdefault("model", self.config.model_id)
        request = fix_tool_choice(request)
        validate_request_body(request)

        request_id = new_request_id()
        model = request["model"]
        started = time.perf_counter()
        usage: Usage | None = None
        done_seen = False

        await self._emit_lifecycle_event(
            event_type="request_start",
            request_id=request_id,
            model=model,
        )

        try:
            raw = self._adapter.stream_completion(request)
            async with aclosing(normalize(raw, self._provider)) as events:
                async for event in events:
                    if isinstance(event, StreamUsageEvent):
                        usage = Usage(
                            input_tokens=event.input_tokens,
                            output_tokens=event.output_tokens,
                        )
                    elif isinstance(event, StreamDoneEvent):
                        done_seen = True
                    await self._emit_lifecycle_event(
                        event_type="stream_event",
                        request_id=request_id,
                        model=model,
                        stream_event_type=event.type,
                    )
                    yield event
        except (GeneratorExit, asyncio.CancelledError):
            # Closing after `done` is a normal finish, not a cancellation.
            await self._emit_lifecycle_event(
                event_type="request_success" if done_seen else "cancel",
                request_id=request_id,
                model=model,
                latency_ms=_elapsed_ms(started),
                usage=usage,
            )
            raise
        except Exception as e:
            await self._emit_lifecycle_event(
                event_type="request_error",
                request_id=request_id,
                model=model,
                latency_ms=_elapsed_ms(started),
                usage=usage,
                error=e,
            )
            raise

        await self._emit_lifecycle_event(
            event_type="request_success",
            request_id=request_id,
            model=model,
            latency_ms=_elapsed_ms(started),
            usage=usage,
        )

    def _resolve_config(
        self,
        config: HubConfig | Mapping[str, Any] | None,
        overrides: Mapping[str, Any],
    ) -> HubConfig:
        if isinstance(config, HubConfig):
            if not overrides:
                return config
            base: dict[str, Any] = {
                name: getattr(config, name) for name in HubConfig.__dataclass_fields__
            }
        elif config is None:
            base = {}
        else:
            base = dict(config)

        base.update(overrides)
        return HubConfig.from_mapping(base)

    async def _emit_lifecycle_event(
        self,
        *,
        event_type: str,
        request_id: str,
        model: str | None,
        latency_ms: float | None = None,
        usage: Usage | None = None,
        stream_event_type: str | None = None,
        error: Exception | None = None,
    ) -> None:
        """Emit one lifecycle event to observers, swallowing observer failures."""
        if not self._observers:
            return

        event = LLMLifecycleEvent(
            event_type=cast(Any, event_type),
            request_id=request_id,
            provider=self._provider,
            model=model,
            latency_ms=latency_ms,
            usage=usage,
            stream_event_type=stream_event_type,
            error_class=type(error).__name__ if error is not None else None,
            error_message=str(error) if error is not None else None,
        )

        for observer in self._observers:
            try:
                result = observer(event)
                if inspect.isawaitable(result):
                    await cast(Awaitable[Any], result)
            except Exception:
                continue


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
