from __future__ import annotations

import sys
import types

import pytest


class FakeStream:
    """Async-iterable stand-in for an SDK `AsyncStream` with close tracking."""

    def __init__(self, events, error: Exception | None = None):
        self._events = list(events)
        self._error = error
        self.closed = False
        self.yielded = 0

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for event in self._events:
            self.yielded += 1
            yield event
        if self._error is not None:
            raise self._error

    async def close(self):
        self.closed = True


class FakeSDK:
    """Records constructor kwargs, call payloads and the streams handed out."""

    def __init__(self):
        self.client_kwargs: list[dict] = []
        self.calls: list[dict] = []
        self.streams: list[FakeStream] = []
        self.events: list = []
        self.error: Exception | None = None
        self.create_error: Exception | None = None

    def open_stream(self, kwargs: dict) -> FakeStream:
        self.calls.append(kwargs)
        if self.create_error is not None:
            raise self.create_error
        stream = FakeStream(self.events, error=self.error)
        self.streams.append(stream)
        return stream


def anthropic_text_events(text_parts=("Hello", " World"), input_tokens=10):
    first, *rest = text_parts
    events = [
        {
            "type": "message_start",
            "message": {"usage": {"input_tokens": input_tokens, "output_tokens": 0}},
        },
        {
            "type": "content_block_start",
            "index": 0,
            "content_block": {"type": "text", "text": first},
        },
    ]
    for part in rest:
        events.append(
            {
                "type": "content_block_delta",
                "index": 0,
                "delta": {"type": "text_delta", "text": part},
            }
        )
    return events


@pytest.fixture
def fake_anthropic(monkeypatch):
    sdk = FakeSDK()
    module = types.ModuleType("anthropic")

    class _MessagesAPI:
        async def create(self, **kwargs):
            return sdk.open_stream(kwargs)

    class AsyncAnthropic:
        def __init__(self, **kwargs):
            sdk.client_kwargs.append(kwargs)
            self.messages = _MessagesAPI()

    module.AsyncAnthropic = AsyncAnthropic
    monkeypatch.setitem(sys.modules, "anthropic", module)
    return sdk


@pytest.fixture
def fake_openai(monkeypatch):
    sdk = FakeSDK()
    module = types.ModuleType("openai")

    class _CompletionsAPI:
        async def create(self, **kwargs):
            return sdk.open_stream(kwargs)

    class _ChatAPI:
        def __init__(self):
            self.completions = _CompletionsAPI()

    class _ResponsesTrap:
        def __getattr__(self, name):
            raise AssertionError(f"responses API should not be used: {name}")

    class AsyncOpenAI:
        def __init__(self, **kwargs):
            sdk.client_kwargs.append(kwargs)
            self.chat = _ChatAPI()
            self.responses = _ResponsesTrap()

    module.AsyncOpenAI = AsyncOpenAI
    monkeypatch.setitem(sys.modules, "openai", module)
    return sdk


@pytest.fixture
def fake_genai(monkeypatch):
    sdk = FakeSDK()
    google_module = types.ModuleType("google")
    genai_module = types.ModuleType("google.genai")

    class _AsyncModels:
        async def generate_content_stream(self, **kwargs):
            return sdk.open_stream(kwargs)

    class _Aio:
        def __init__(self):
            self.models = _AsyncModels()

    class Client:
        def __init__(self, **kwargs):
            sdk.client_kwargs.append(kwargs)
            self.aio = _Aio()

    genai_module.Client = Client
    google_module.genai = genai_module
    monkeypatch.setitem(sys.modules, "google", google_module)
    monkeypatch.setitem(sys.modules, "google.genai", genai_module)
    return sdk


@pytest.fixture
def make_stream():
    return FakeStream


@pytest.fixture
def anthropic_events():
    return anthropic_text_events
