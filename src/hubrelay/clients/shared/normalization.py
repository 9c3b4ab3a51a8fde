from __future__ import annotations

"""
Shared helpers for reading vendor SDK objects and plain dict payloads alike.

SDK stream events arrive as pydantic models, plain objects or dicts depending
on the SDK version and on how tests fake them; these helpers flatten that.
"""

from typing import Any


def to_plain_dict(value: Any) -> dict[str, Any]:
    """
    Flatten one top-level stream event into a dict.

    Every SDK we talk to emits pydantic models; plain attribute objects are
    read through `vars()`. Anything else yields `{}`.
    """
    if isinstance(value, dict):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump()
    if hasattr(value, "__dict__"):
        return dict(vars(value))
    return {}


def get_field(obj: Any, name: str) -> Any:
    """Read `name` from a dict key or an attribute, whichever exists."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def get_field_str(obj: Any, name: str) -> str | None:
    value = get_field(obj, name)
    return value if isinstance(value, str) else None


def get_field_int(obj: Any, name: str) -> int | None:
    value = get_field(obj, name)
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


def extract_text_from_content(content: Any) -> str:
    """Extract plain text from OpenAI-chat content (string or part list)."""
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        out: list[str] = []
        for item in content:
            if isinstance(item, str):
                out.append(item)
                continue
            if isinstance(item, dict) and isinstance(item.get("text"), str):
                out.append(item["text"])
        return "".join(out)

    return ""
