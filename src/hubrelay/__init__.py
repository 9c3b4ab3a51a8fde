"""
hubrelay: one streaming interface over Anthropic-, OpenAI- and Gemini-style
models served through a unified gateway.
"""

from .config import HubConfig
from .errors import (
    LLMConfigurationError,
    LLMError,
    LLMInvalidRequestError,
    LLMInvalidResponseError,
)
from .factory import create_adapter, register_adapter, unregister_adapter
from .handler import DEFAULT_MODEL_DESCRIPTION, UnifiedHandler
from .observability import LLMLifecycleEvent, LLMObserver
from .routing import select_provider
from .sanitize import fix_tool_choice
from .streaming import normalize
from .types import (
    ModelDescriptor,
    ModelInfo,
    NormalizedStreamEvent,
    ProviderKind,
    RequestBody,
    StreamDoneEvent,
    StreamTextDeltaEvent,
    StreamUsageEvent,
    Usage,
)

__all__ = [
    "UnifiedHandler",
    "DEFAULT_MODEL_DESCRIPTION",
    "HubConfig",
    "ProviderKind",
    "select_provider",
    "fix_tool_choice",
    "normalize",
    "create_adapter",
    "register_adapter",
    "unregister_adapter",
    "ModelDescriptor",
    "ModelInfo",
    "RequestBody",
    "NormalizedStreamEvent",
    "StreamTextDeltaEvent",
    "StreamUsageEvent",
    "StreamDoneEvent",
    "Usage",
    "LLMLifecycleEvent",
    "LLMObserver",
    "LLMError",
    "LLMConfigurationError",
    "LLMInvalidRequestError",
    "LLMInvalidResponseError",
]
