from __future__ import annotations

"""
Request-body fixes for known provider quirks.
"""

from typing import Any, Mapping


def fix_tool_choice(body: Mapping[str, Any]) -> dict[str, Any]:
    """
    Drop `tool_choice` when the request offers an empty tool list.

    At least one upstream rejects a tool-choice directive without tools.
    A non-empty or missing `tools` leaves `tool_choice` untouched. Returns a
    shallow copy; the input body is never mutated.
    """
    out = dict(body)
    tools = out.get("tools")
    if tools is not None and len(tools) == 0:
        out.pop("tool_choice", None)
    return out
