from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines the provider-agnostic types shared by routing, adapters,
stream normalization and the handler facade.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, NotRequired, TypeAlias, TypedDict


JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONSchema: TypeAlias = dict[str, JSONValue]

Role = Literal["user", "assistant", "system", "tool"]


class ProviderKind(str, Enum):
    """Backend family a model identifier is dispatched to."""

    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENAI = "openai"


class ChatMessage(TypedDict):
    role: Role
    content: str | list[dict[str, Any]]
    name: NotRequired[str]


class ToolFunctionSpec(TypedDict):
    name: str
    parameters: NotRequired[JSONSchema]
    description: NotRequired[str]


class ToolSpec(TypedDict):
    type: Literal["function"]
    function: ToolFunctionSpec


class ToolChoiceFunction(TypedDict):
    name: str


class ToolChoiceNamed(TypedDict):
    type: Literal["function"]
    function: ToolChoiceFunction


ToolChoice: TypeAlias = Literal["auto", "none", "required"] | ToolChoiceNamed | str


class RequestBody(TypedDict, total=False):
    """
    OpenAI-chat-shaped request body accepted by the handler.

    Adapters translate it into each vendor's native request; only the
    sanitizer is allowed to change it before that.
    """

    model: str
    messages: list[ChatMessage]
    system: str
    tools: list[ToolSpec]
    tool_choice: ToolChoice
    max_tokens: int
    temperature: float
    top_p: float
    stop: list[str]


@dataclass(frozen=True, slots=True)
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True, slots=True)
class ModelInfo:
    description: str
    provider: ProviderKind
    max_tokens: int | None = None
    supports_streaming: bool = True


@dataclass(frozen=True, slots=True)
class ModelDescriptor:
    id: str
    info: ModelInfo


@dataclass(frozen=True, slots=True)
class StreamTextDeltaEvent:
    text: str
    type: Literal["text_delta"] = "text_delta"


@dataclass(frozen=True, slots=True)
class StreamUsageEvent:
    input_tokens: int = 0
    output_tokens: int = 0
    type: Literal["usage"] = "usage"


@dataclass(frozen=True, slots=True)
class StreamDoneEvent:
    type: Literal["done"] = "done"


NormalizedStreamEvent: TypeAlias = (
    StreamTextDeltaEvent
    | StreamUsageEvent
    | StreamDoneEvent
)
