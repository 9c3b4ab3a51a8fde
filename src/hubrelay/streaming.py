from __future__ import annotations

"""
Stream normalization: provider-native stream events -> normalized events.

Each provider has one mapper from a raw event to zero or more normalized
events. `normalize` drives the mapper over the raw stream and guarantees:
  - events keep the provider's order and are produced once
  - exactly one `StreamDoneEvent` ends a cleanly finished stream
  - an upstream exception propagates without a `StreamDoneEvent`
  - closing the normalized stream early closes the raw stream
"""

from typing import Any, AsyncIterable, AsyncIterator, Callable

from .clients.shared.normalization import (
    get_field,
    get_field_int,
    get_field_str,
    to_plain_dict,
)
from .errors import LLMInvalidResponseError
from .types import (
    NormalizedStreamEvent,
    ProviderKind,
    StreamDoneEvent,
    StreamTextDeltaEvent,
    StreamUsageEvent,
)
from .utils import close_stream


class UsageAccumulator:
    """Running token counters for one normalization pass."""

    def __init__(self) -> None:
        self.input_tokens = 0
        self.output_tokens = 0

    def update(
        self,
        *,
        input_tokens: int | None = None,
        output_tokens: int | None = None,
    ) -> StreamUsageEvent:
        # Providers report cumulative counts, so the latest value replaces.
        if input_tokens is not None:
            self.input_tokens = input_tokens
        if output_tokens is not None:
            self.output_tokens = output_tokens
        return StreamUsageEvent(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


EventMapper = Callable[[dict[str, Any], UsageAccumulator], list[NormalizedStreamEvent]]


def map_anthropic_event(
    event: dict[str, Any],
    usage: UsageAccumulator,
) -> list[NormalizedStreamEvent]:
    """Map one Messages API stream event."""
    event_type = event.get("type")

    if event_type == "message_start":
        raw_usage = get_field(event.get("message"), "usage")
        return [
            usage.update(
                input_tokens=get_field_int(raw_usage, "input_tokens") or 0,
                output_tokens=get_field_int(raw_usage, "output_tokens") or 0,
            )
        ]

    if event_type == "content_block_start":
        block = event.get("content_block")
        text = get_field_str(block, "text")
        if get_field(block, "type") == "text" and text:
            return [StreamTextDeltaEvent(text=text)]
        return []

    if event_type == "content_block_delta":
        delta = event.get("delta")
        text = get_field_str(delta, "text")
        if get_field(delta, "type") == "text_delta" and text:
            return [StreamTextDeltaEvent(text=text)]
        return []

    if event_type == "message_delta":
        raw_usage = event.get("usage")
        if raw_usage is None:
            return []
        return [
            usage.update(
                input_tokens=get_field_int(raw_usage, "input_tokens"),
                output_tokens=get_field_int(raw_usage, "output_tokens"),
            )
        ]

    if event_type == "message_stop":
        return [StreamDoneEvent()]

    return []


def map_openai_chunk(
    chunk: dict[str, Any],
    usage: UsageAccumulator,
) -> list[NormalizedStreamEvent]:
    """Map one Chat Completions stream chunk."""
    out: list[NormalizedStreamEvent] = []

    choices = chunk.get("choices")
    if isinstance(choices, list) and choices:
        delta = get_field(choices[0], "delta")
        text = get_field_str(delta, "content")
        if text:
            out.append(StreamTextDeltaEvent(text=text))

    raw_usage = chunk.get("usage")
    if raw_usage is not None:
        out.append(
            usage.update(
                input_tokens=get_field_int(raw_usage, "prompt_tokens"),
                output_tokens=get_field_int(raw_usage, "completion_tokens"),
            )
        )

    return out


def map_gemini_chunk(
    chunk: dict[str, Any],
    usage: UsageAccumulator,
) -> list[NormalizedStreamEvent]:
    """Map one `GenerateContentResponse` chunk."""
    out: list[NormalizedStreamEvent] = []

    text = _gemini_chunk_text(chunk)
    if text:
        out.append(StreamTextDeltaEvent(text=text))

    metadata = chunk.get("usage_metadata")
    if metadata is not None:
        out.append(
            usage.update(
                input_tokens=get_field_int(metadata, "prompt_token_count"),
                output_tokens=get_field_int(metadata, "candidates_token_count"),
            )
        )

    return out


def _gemini_chunk_text(chunk: dict[str, Any]) -> str:
    text = chunk.get("text")
    if isinstance(text, str):
        return text

    candidates = chunk.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""

    parts = get_field(get_field(candidates[0], "content"), "parts")
    if not isinstance(parts, list):
        return ""

    out: list[str] = []
    for part in parts:
        # thought summaries are not answer text
        if get_field(part, "thought"):
            continue
        part_text = get_field_str(part, "text")
        if part_text:
            out.append(part_text)
    return "".join(out)


EVENT_MAPPERS: dict[ProviderKind, EventMapper] = {
    ProviderKind.ANTHROPIC: map_anthropic_event,
    ProviderKind.OPENAI: map_openai_chunk,
    ProviderKind.GEMINI: map_gemini_chunk,
}


async def normalize(
    raw: AsyncIterable[Any],
    provider: ProviderKind,
) -> AsyncIterator[NormalizedStreamEvent]:
    """Yield normalized events for a raw `provider` stream; single pass."""
    mapper = EVENT_MAPPERS[provider]
    usage = UsageAccumulator()

    try:
        async for raw_event in raw:
            event = to_plain_dict(raw_event)
            if not event and not isinstance(raw_event, dict):
                raise LLMInvalidResponseError(
                    f"Unreadable {provider.value} stream event: {raw_event!r}"
                )

            for normalized in mapper(event, usage):
                yield normalized
                if isinstance(normalized, StreamDoneEvent):
                    return

        yield StreamDoneEvent()
    finally:
        await close_stream(raw)
