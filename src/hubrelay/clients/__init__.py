"""Provider client package.

Structure:
- `adapters/`: provider-specific adapter implementations
- `base`: the abstract adapter every provider extends
- `shared/`: reusable SDK-object reading utilities
"""

from .adapters import AnthropicClient, GeminiClient, OpenAIClient
from .base import ProviderAdapter

__all__ = [
    "ProviderAdapter",
    "AnthropicClient",
    "GeminiClient",
    "OpenAIClient",
]
