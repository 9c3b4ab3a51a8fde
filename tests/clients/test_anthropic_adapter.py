from __future__ import annotations

import asyncio

import pytest

from hubrelay.clients.adapters.anthropic import AnthropicClient
from hubrelay.config import HubConfig


def run_async(coro):
    return asyncio.run(coro)


def _config(**kwargs) -> HubConfig:
    return HubConfig(api_key="test-api-key", model_id="claude-3-5-sonnet-20241022", **kwargs)


def _tool_def() -> dict:
    return {
        "type": "function",
        "function": {
            "name": "add_numbers",
            "description": "Add numbers",
            "parameters": {
                "type": "object",
                "properties": {"numbers": {"type": "array", "items": {"type": "number"}}},
                "required": ["numbers"],
            },
        },
    }


async def _drain(adapter, body):
    return [event async for event in adapter.stream_completion(body)]


def test_client_points_at_gateway_with_app_code(fake_anthropic):
    adapter = AnthropicClient(config=_config(base_url="https://custom.aihubmix.com", app_code="Custom2025"))
    fake_anthropic.events = [{"type": "message_stop"}]

    run_async(_drain(adapter, {"model": "claude-3-5-sonnet-20241022", "messages": []}))

    assert len(fake_anthropic.client_kwargs) == 1
    kwargs = fake_anthropic.client_kwargs[0]
    assert kwargs["api_key"] == "test-api-key"
    assert kwargs["base_url"] == "https://custom.aihubmix.com"
    assert kwargs["default_headers"] == {"APP-Code": "Custom2025"}
    assert kwargs["max_retries"] == 0


def test_payload_lifts_system_and_maps_tools(fake_anthropic):
    adapter = AnthropicClient(config=_config(max_tokens=1024))
    body = {
        "model": "claude-3-5-sonnet-20241022",
        "system": "You are terse.",
        "messages": [
            {"role": "system", "content": "Answer in English."},
            {"role": "user", "content": "add 1 and 2"},
            {"role": "assistant", "content": [{"type": "text", "text": "calling tool"}]},
            {"role": "tool", "name": "add_numbers", "content": "3"},
        ],
        "tools": [_tool_def()],
        "tool_choice": "required",
        "temperature": 0.2,
        "stop": ["<END>"],
    }

    run_async(_drain(adapter, body))

    payload = fake_anthropic.calls[0]
    assert payload["stream"] is True
    assert payload["model"] == "claude-3-5-sonnet-20241022"
    assert payload["max_tokens"] == 1024
    assert payload["system"] == "You are terse.\n\nAnswer in English."
    assert payload["messages"] == [
        {"role": "user", "content": "add 1 and 2"},
        {"role": "assistant", "content": [{"type": "text", "text": "calling tool"}]},
        {"role": "user", "content": "[tool_result:add_numbers] 3"},
    ]
    assert payload["tools"] == [
        {
            "name": "add_numbers",
            "input_schema": _tool_def()["function"]["parameters"],
            "description": "Add numbers",
        }
    ]
    assert payload["tool_choice"] == {"type": "any"}
    assert payload["temperature"] == 0.2
    assert payload["stop_sequences"] == ["<END>"]


@pytest.mark.parametrize(
    ("choice", "expected"),
    [
        ("auto", {"type": "auto"}),
        ("none", {"type": "none"}),
        ({"type": "function", "function": {"name": "add_numbers"}}, {"type": "tool", "name": "add_numbers"}),
    ],
)
def test_tool_choice_mapping(choice, expected):
    adapter = AnthropicClient(config=_config())

    assert adapter._tool_choice_to_anthropic(choice) == expected


def test_request_max_tokens_wins_over_config(fake_anthropic):
    adapter = AnthropicClient(config=_config(max_tokens=1024))

    run_async(_drain(adapter, {"model": "claude-x", "messages": [], "max_tokens": 50}))

    assert fake_anthropic.calls[0]["max_tokens"] == 50
    assert "tools" not in fake_anthropic.calls[0]
    assert "tool_choice" not in fake_anthropic.calls[0]


def test_raw_events_are_yielded_untouched(fake_anthropic, anthropic_events):
    adapter = AnthropicClient(config=_config())
    fake_anthropic.events = anthropic_events()

    events = run_async(_drain(adapter, {"model": "claude-x", "messages": []}))

    assert events == anthropic_events()
    assert fake_anthropic.streams[0].closed is True


def test_client_is_built_once(fake_anthropic):
    adapter = AnthropicClient(config=_config())

    run_async(_drain(adapter, {"model": "claude-x", "messages": []}))
    run_async(_drain(adapter, {"model": "claude-x", "messages": []}))

    assert len(fake_anthropic.client_kwargs) == 1
    assert len(fake_anthropic.calls) == 2


def test_vendor_error_on_create_propagates_unchanged(fake_anthropic):
    class AuthenticationError(Exception):
        pass

    adapter = AnthropicClient(config=_config())
    fake_anthropic.create_error = AuthenticationError("invalid x-api-key")

    with pytest.raises(AuthenticationError, match="invalid x-api-key"):
        run_async(_drain(adapter, {"model": "claude-x", "messages": []}))

    assert len(fake_anthropic.calls) == 1
