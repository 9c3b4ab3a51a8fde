"""Provider adapter implementations."""

from .anthropic import AnthropicClient
from .gemini import GeminiClient
from .openai import OpenAIClient

__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "OpenAIClient",
]
