from __future__ import annotations
import os

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

"""
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import LLMConfigurationError

DEFAULT_MODEL_ID = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://aihubmix.com"
DEFAULT_APP_CODE = "KUWF9311"
DEFAULT_TIMEOUT_S = 600.0
DEFAULT_MAX_TOKENS = 8192

# Settings UI field names -> HubConfig field names.
_MAPPING_ALIASES = {
    "apiKey": "api_key",
    "modelId": "model_id",
    "baseURL": "base_url",
    "baseUrl": "base_url",
    "appCode": "app_code",
    "timeoutS": "timeout_s",
    "maxTokens": "max_tokens",
}


@dataclass(frozen=True, slots=True)
class HubConfig:
    # Credentials
    api_key: str | None = None

    # Routing
    model_id: str = DEFAULT_MODEL_ID
    base_url: str = DEFAULT_BASE_URL
    app_code: str = DEFAULT_APP_CODE

    # Transport
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_tokens: int = DEFAULT_MAX_TOKENS

    def __post_init__(self) -> None:
        # Endpoints are built as f"{base_url}/<suffix>"; keep a single separator.
        if isinstance(self.base_url, str):
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @staticmethod
    def from_env() -> "HubConfig":
        return HubConfig.from_mapping(
            {
                "api_key": os.getenv("HUBRELAY_API_KEY"),
                "model_id": os.getenv("HUBRELAY_MODEL"),
                "base_url": os.getenv("HUBRELAY_BASE_URL"),
                "app_code": os.getenv("HUBRELAY_APP_CODE"),
                "timeout_s": os.getenv("HUBRELAY_TIMEOUT_S"),
                "max_tokens": os.getenv("HUBRELAY_MAX_TOKENS"),
            }
        )

    @staticmethod
    def from_mapping(values: Mapping[str, Any]) -> "HubConfig":
        """
        Build a config from snake_case or settings-UI camelCase keys.

        Unknown keys are ignored; `None` and blank strings fall back to defaults.
        """
        fields: dict[str, Any] = {}
        for key, value in values.items():
            name = _MAPPING_ALIASES.get(key, key)
            if name not in HubConfig.__dataclass_fields__:
                continue
            if value is None:
                continue
            if isinstance(value, str) and not value.strip() and name != "api_key":
                continue
            fields[name] = value

        if "timeout_s" in fields:
            fields["timeout_s"] = _coerce_number(fields["timeout_s"], float, "timeout_s")
        if "max_tokens" in fields:
            fields["max_tokens"] = _coerce_number(fields["max_tokens"], int, "max_tokens")
        return HubConfig(**fields)


def _coerce_number(value: Any, kind: type, field_name: str) -> Any:
    try:
        out = kind(value)
    except (TypeError, ValueError) as e:
        raise LLMConfigurationError(f"{field_name} must be a number, got {value!r}") from e
    if out <= 0:
        raise LLMConfigurationError(f"{field_name} must be greater than 0")
    return out
