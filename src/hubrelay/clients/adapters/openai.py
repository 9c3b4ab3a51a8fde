from __future__ import annotations

"""
OpenAI Chat Completions adapter; also the gateway's fallback for custom models.
"""

from typing import Any, Mapping

from ..base import ProviderAdapter
from ...errors import LLMConfigurationError
from ...types import ProviderKind


class OpenAIClient(ProviderAdapter):
    """Concrete adapter using `openai.AsyncOpenAI` Chat Completions API."""

    @property
    def provider_kind(self) -> ProviderKind:
        return ProviderKind.OPENAI

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/v1"

    async def _open_stream(self, client: Any, payload: dict[str, Any]) -> Any:
        """Dispatch a streaming payload to Chat Completions."""
        return await client.chat.completions.create(**payload)

    def _build_payload(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Body is already chat-shaped; only the system prompt and stream flags move."""
        payload = dict(body)
        messages = list(payload.get("messages") or [])

        system = payload.pop("system", None)
        if isinstance(system, str) and system:
            messages = [{"role": "system", "content": system}, *messages]

        payload["messages"] = messages
        payload["stream"] = True

        stream_options = payload.get("stream_options")
        stream_options = dict(stream_options) if isinstance(stream_options, dict) else {}
        stream_options.setdefault("include_usage", True)
        payload["stream_options"] = stream_options
        return payload

    def _build_client(self) -> Any:
        """Construct AsyncOpenAI client pointed at the gateway."""
        try:
            from openai import AsyncOpenAI
        except Exception as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "openai package is not installed. Install it with: pip install openai"
            ) from e

        return AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.endpoint,
            default_headers=self.default_headers(),
            timeout=self.config.timeout_s,
            max_retries=0,
        )
