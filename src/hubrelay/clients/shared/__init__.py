"""Shared client helper utilities."""

from .normalization import (
    extract_text_from_content,
    get_field,
    get_field_int,
    get_field_str,
    to_plain_dict,
)

__all__ = [
    "to_plain_dict",
    "extract_text_from_content",
    "get_field",
    "get_field_int",
    "get_field_str",
]
