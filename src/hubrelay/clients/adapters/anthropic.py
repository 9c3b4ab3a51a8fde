from __future__ import annotations

"""
Anthropic Messages API adapter.

Requests are sent through `anthropic.AsyncAnthropic` with `stream=True`, so the
stream yields the raw `message_start` / `content_block_*` / `message_delta` /
`message_stop` events that `hubrelay.streaming` understands.
"""

import json
from typing import Any, Mapping

from ..base import ProviderAdapter
from ...errors import LLMConfigurationError
from ...types import ProviderKind


class AnthropicClient(ProviderAdapter):
    """Concrete adapter using `anthropic.AsyncAnthropic` Messages API."""

    @property
    def provider_kind(self) -> ProviderKind:
        return ProviderKind.ANTHROPIC

    async def _open_stream(self, client: Any, payload: dict[str, Any]) -> Any:
        """Dispatch a streaming payload to the Messages API."""
        return await client.messages.create(**payload)

    def _build_payload(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Map an OpenAI-chat-shaped body into Messages API kwargs."""
        system_chunks: list[str] = []
        if isinstance(body.get("system"), str) and body["system"]:
            system_chunks.append(body["system"])

        messages: list[dict[str, Any]] = []
        for message in body.get("messages") or []:
            role = message.get("role")
            if role == "system":
                text = _content_to_text(message.get("content"))
                if text:
                    system_chunks.append(text)
                continue
            messages.append(self._message_to_anthropic(message))

        payload: dict[str, Any] = {
            "model": body["model"],
            "messages": messages,
            "max_tokens": body.get("max_tokens") or self.config.max_tokens,
            "stream": True,
        }

        if system_chunks:
            payload["system"] = "\n\n".join(system_chunks)
        if body.get("temperature") is not None:
            payload["temperature"] = body["temperature"]
        if body.get("top_p") is not None:
            payload["top_p"] = body["top_p"]
        if body.get("stop"):
            payload["stop_sequences"] = list(body["stop"])

        tools = body.get("tools")
        if tools is not None:
            payload["tools"] = [self._tool_to_anthropic_tool(t) for t in tools]

        if "tool_choice" in body:
            payload["tool_choice"] = self._tool_choice_to_anthropic(body["tool_choice"])

        return payload

    def _message_to_anthropic(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """Convert one chat message; tool results are folded into user turns."""
        role = message.get("role")
        content = message.get("content")

        if role == "tool":
            label = message.get("name") or message.get("tool_call_id") or "tool"
            return {
                "role": "user",
                "content": f"[tool_result:{label}] {_content_to_text(content)}",
            }

        role = "assistant" if role == "assistant" else "user"
        if isinstance(content, str):
            return {"role": role, "content": content}

        blocks: list[dict[str, Any]] = []
        for part in content or []:
            if not isinstance(part, dict):
                blocks.append({"type": "text", "text": str(part)})
                continue
            if part.get("type") == "text" and isinstance(part.get("text"), str):
                blocks.append({"type": "text", "text": part["text"]})
                continue
            if part.get("type") in ("image", "tool_use", "tool_result"):
                # already Messages API shaped
                blocks.append(dict(part))
                continue
            blocks.append(
                {"type": "text", "text": json.dumps(part, ensure_ascii=True, default=str)}
            )

        if not blocks:
            blocks.append({"type": "text", "text": ""})
        return {"role": role, "content": blocks}

    def _tool_to_anthropic_tool(self, tool: Mapping[str, Any]) -> dict[str, Any]:
        """Convert an OpenAI function tool into Anthropic's tool schema."""
        if tool.get("type") != "function" or not isinstance(tool.get("function"), dict):
            return dict(tool)

        function = tool["function"]
        out: dict[str, Any] = {
            "name": function.get("name"),
            "input_schema": function.get("parameters") or {"type": "object", "properties": {}},
        }
        description = function.get("description")
        if isinstance(description, str):
            out["description"] = description
        return out

    def _tool_choice_to_anthropic(self, tool_choice: Any) -> Any:
        """Convert OpenAI-style `tool_choice` into Anthropic's shape."""
        if tool_choice == "auto":
            return {"type": "auto"}
        if tool_choice == "required":
            return {"type": "any"}
        if tool_choice == "none":
            return {"type": "none"}

        if isinstance(tool_choice, dict) and tool_choice.get("type") == "function":
            function = tool_choice.get("function")
            if isinstance(function, dict) and isinstance(function.get("name"), str):
                return {"type": "tool", "name": function["name"]}

        return tool_choice

    def _build_client(self) -> Any:
        """Construct AsyncAnthropic client pointed at the gateway."""
        try:
            from anthropic import AsyncAnthropic
        except Exception as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "anthropic package is not installed. Install it with: pip install anthropic"
            ) from e

        return AsyncAnthropic(
            api_key=self.config.api_key,
            base_url=self.endpoint,
            default_headers=self.default_headers(),
            timeout=self.config.timeout_s,
            max_retries=0,
        )


def _content_to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return "" if content is None else str(content)

    out: list[str] = []
    for part in content:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            out.append(part["text"])
        elif isinstance(part, str):
            out.append(part)
    return "\n".join(out)
