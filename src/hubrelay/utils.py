from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Small async/stream helpers shared by adapters, the normalizer and the handler.
"""
import inspect
import uuid
from typing import Any


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


async def close_stream(stream: Any) -> None:
    """
    Release a provider stream.

    Async generators expose `aclose()`; SDK stream objects (openai/anthropic
    `AsyncStream`) expose an async `close()`. Plain iterables need nothing.
    """
    closer = getattr(stream, "aclose", None)
    if closer is None:
        closer = getattr(stream, "close", None)
    if closer is None:
        return

    result = closer()
    if inspect.isawaitable(result):
        await result
