from __future__ import annotations

"""
Model identifier -> provider routing.

Rules are evaluated in order and the first match wins; anything unmatched
goes to the OpenAI-compatible endpoint, which the gateway uses for custom and
unknown models.
"""

from dataclasses import dataclass

from .types import ProviderKind

# Gemini variants the native Gemini endpoint does not serve.
EXCLUDED_GEMINI_SUFFIXES = ("-nothink", "-search")


@dataclass(frozen=True, slots=True)
class RoutingRule:
    provider: ProviderKind
    prefix: str
    excluded_suffixes: tuple[str, ...] = ()

    def matches(self, model_id: str) -> bool:
        if not model_id.startswith(self.prefix):
            return False
        return not any(model_id.endswith(suffix) for suffix in self.excluded_suffixes)


ROUTING_RULES: tuple[RoutingRule, ...] = (
    RoutingRule(provider=ProviderKind.ANTHROPIC, prefix="claude-"),
    RoutingRule(
        provider=ProviderKind.GEMINI,
        prefix="gemini-",
        excluded_suffixes=EXCLUDED_GEMINI_SUFFIXES,
    ),
)
DEFAULT_PROVIDER = ProviderKind.OPENAI


def select_provider(
    model_id: str,
    rules: tuple[RoutingRule, ...] = ROUTING_RULES,
) -> ProviderKind:
    """Return the provider that serves `model_id`. Never fails."""
    for rule in rules:
        if rule.matches(model_id):
            return rule.provider
    return DEFAULT_PROVIDER
