from __future__ import annotations

"""
Factory utilities mapping a `ProviderKind` onto a concrete adapter.
"""

from typing import TYPE_CHECKING, Callable

from .config import HubConfig
from .types import ProviderKind

if TYPE_CHECKING:
    from .clients.base import ProviderAdapter


AdapterFactory = Callable[[HubConfig], "ProviderAdapter"]
_REGISTRY: dict[ProviderKind, AdapterFactory] = {}


def register_adapter(
    kind: ProviderKind,
    factory: AdapterFactory,
    *,
    overwrite: bool = False,
) -> None:
    """Replace the built-in adapter for one provider family."""
    if (not overwrite) and kind in _REGISTRY:
        raise ValueError(f"Adapter already registered: {kind.value}")

    _REGISTRY[kind] = factory


def unregister_adapter(kind: ProviderKind) -> None:
    """Drop a runtime override and fall back to the built-in adapter."""
    _REGISTRY.pop(kind, None)


def create_adapter(kind: ProviderKind, config: HubConfig) -> "ProviderAdapter":
    """Create the adapter that serves `kind`."""
    factory = _REGISTRY.get(kind)
    if factory is None:
        factory = _builtin_factory(kind)
    return factory(config)


def _builtin_factory(kind: ProviderKind) -> AdapterFactory:
    """Resolve built-in adapter classes lazily to avoid import cycles."""
    if kind is ProviderKind.ANTHROPIC:
        from .clients.adapters.anthropic import AnthropicClient

        return lambda cfg: AnthropicClient(config=cfg)

    if kind is ProviderKind.GEMINI:
        from .clients.adapters.gemini import GeminiClient

        return lambda cfg: GeminiClient(config=cfg)

    from .clients.adapters.openai import OpenAIClient

    return lambda cfg: OpenAIClient(config=cfg)
