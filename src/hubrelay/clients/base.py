from __future__ import annotations

"""
Shared base for provider adapters.

An adapter owns exactly one vendor SDK client and knows how to turn a
`RequestBody` into that vendor's streaming call. It yields the vendor's raw
events untouched; mapping them onto normalized events is the job of
`hubrelay.streaming`.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Mapping

from ..config import HubConfig
from ..types import ProviderKind
from ..utils import close_stream

APP_CODE_HEADER = "APP-Code"


class ProviderAdapter(ABC):
    """Provider-agnostic base for gateway-backed vendor clients."""

    def __init__(self, *, config: HubConfig) -> None:
        self.config = config
        self._client: Any = None

    @property
    @abstractmethod
    def provider_kind(self) -> ProviderKind:
        """Provider family served by this adapter."""

    @property
    def client(self) -> Any:
        """Vendor SDK client, built on first use and reused afterwards."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    @property
    def endpoint(self) -> str:
        """Gateway URL this adapter's SDK client talks to."""
        return self.config.base_url

    def default_headers(self) -> dict[str, str]:
        """Headers sent with every upstream request."""
        return {APP_CODE_HEADER: self.config.app_code}

    async def stream_completion(self, body: Mapping[str, Any]) -> AsyncIterator[Any]:
        """
        Issue one streaming call and yield the vendor's raw events.

        Vendor exceptions propagate unchanged and nothing is retried. The
        underlying stream is closed on exhaustion, on error, and when the
        caller stops iterating early.
        """
        payload = self._build_payload(body)
        raw_stream = await self._open_stream(self.client, payload)
        try:
            async for event in raw_stream:
                yield event
        finally:
            await close_stream(raw_stream)

    @abstractmethod
    def _build_client(self) -> Any:
        """Construct the vendor SDK client from shared config."""

    @abstractmethod
    def _build_payload(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Map a `RequestBody` onto the vendor's native request kwargs."""

    @abstractmethod
    async def _open_stream(self, client: Any, payload: dict[str, Any]) -> Any:
        """Start the vendor streaming call and return its async iterable."""
