from __future__ import annotations

"""
Shape validation for outgoing request bodies.

Only the fields adapters read are checked; anything else is passed through
to the provider untouched.
"""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import LLMInvalidRequestError


class MessageModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str
    content: str | list[dict[str, Any]] | None = None


class RequestBodyModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    model: str = Field(min_length=1)
    messages: list[MessageModel]
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    system: str | None = None
    max_tokens: int | None = Field(default=None, gt=0)


def validate_request_body(body: Mapping[str, Any]) -> None:
    """Raise `LLMInvalidRequestError` when `body` cannot be dispatched."""
    try:
        RequestBodyModel.model_validate(dict(body))
    except ValidationError as e:
        raise LLMInvalidRequestError(f"Invalid request body: {e}") from e
