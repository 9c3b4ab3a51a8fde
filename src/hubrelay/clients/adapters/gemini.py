from __future__ import annotations

"""
Gemini adapter built on the `google-genai` SDK.

Chat messages become `contents` with `user`/`model` roles; system text moves
to `config.system_instruction`. Config is passed as a plain dict, which the
SDK accepts in place of `types.GenerateContentConfig`.
"""

from typing import Any, Mapping

from ..base import ProviderAdapter
from ..shared.normalization import extract_text_from_content
from ...errors import LLMConfigurationError
from ...types import ProviderKind

_FUNCTION_CALLING_MODES = {
    "auto": "AUTO",
    "required": "ANY",
    "none": "NONE",
}


class GeminiClient(ProviderAdapter):
    """Concrete adapter using `google.genai.Client().aio`."""

    @property
    def provider_kind(self) -> ProviderKind:
        return ProviderKind.GEMINI

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/gemini"

    async def _open_stream(self, client: Any, payload: dict[str, Any]) -> Any:
        """Dispatch a streaming payload to `generate_content_stream`."""
        return await client.aio.models.generate_content_stream(**payload)

    def _build_payload(self, body: Mapping[str, Any]) -> dict[str, Any]:
        system_chunks: list[str] = []
        if isinstance(body.get("system"), str) and body["system"]:
            system_chunks.append(body["system"])

        contents: list[dict[str, Any]] = []
        for message in body.get("messages") or []:
            role = message.get("role")
            text = extract_text_from_content(message.get("content"))
            if role == "system":
                if text:
                    system_chunks.append(text)
                continue
            if role == "tool":
                label = message.get("name") or message.get("tool_call_id") or "tool"
                text = f"[tool_result:{label}] {text}"
            contents.append(
                {
                    "role": "model" if role == "assistant" else "user",
                    "parts": [{"text": text}],
                }
            )

        config: dict[str, Any] = {
            "max_output_tokens": body.get("max_tokens") or self.config.max_tokens,
        }
        if system_chunks:
            config["system_instruction"] = "\n\n".join(system_chunks)
        if body.get("temperature") is not None:
            config["temperature"] = body["temperature"]
        if body.get("top_p") is not None:
            config["top_p"] = body["top_p"]
        if body.get("stop"):
            config["stop_sequences"] = list(body["stop"])

        tools = body.get("tools")
        if tools:
            config["tools"] = [
                {"function_declarations": [self._tool_to_declaration(t) for t in tools]}
            ]
        if tools and "tool_choice" in body:
            tool_config = self._tool_choice_to_tool_config(body["tool_choice"])
            if tool_config is not None:
                config["tool_config"] = tool_config

        return {
            "model": body["model"],
            "contents": contents,
            "config": config,
        }

    def _tool_to_declaration(self, tool: Mapping[str, Any]) -> dict[str, Any]:
        function = tool.get("function") if isinstance(tool.get("function"), dict) else tool
        out: dict[str, Any] = {"name": function.get("name")}
        if isinstance(function.get("description"), str):
            out["description"] = function["description"]
        if isinstance(function.get("parameters"), dict):
            out["parameters"] = function["parameters"]
        return out

    def _tool_choice_to_tool_config(self, tool_choice: Any) -> dict[str, Any] | None:
        if isinstance(tool_choice, str):
            mode = _FUNCTION_CALLING_MODES.get(tool_choice)
            if mode is None:
                return None
            return {"function_calling_config": {"mode": mode}}

        if isinstance(tool_choice, dict):
            function = tool_choice.get("function")
            if isinstance(function, dict) and isinstance(function.get("name"), str):
                return {
                    "function_calling_config": {
                        "mode": "ANY",
                        "allowed_function_names": [function["name"]],
                    }
                }
        return None

    def _build_client(self) -> Any:
        """Construct a `genai.Client` pointed at the gateway's Gemini route."""
        try:
            from google import genai
        except Exception as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "google-genai is not installed. Install it with: pip install google-genai"
            ) from e

        return genai.Client(
            api_key=self.config.api_key,
            http_options={
                "base_url": self.endpoint,
                "headers": self.default_headers(),
                # milliseconds
                "timeout": int(self.config.timeout_s * 1000),
            },
        )
