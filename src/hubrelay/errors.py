from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines custom exceptions for error handling in the hubrelay package.

Vendor SDK exceptions (auth, rate limit, network) are deliberately absent:
they propagate to the caller unchanged.
"""


class LLMError(Exception):
    """Base exception for all hubrelay errors."""

    pass


class LLMConfigurationError(LLMError):
    """
    Missing or invalid handler configuration, e.g. an empty API key or a
    vendor SDK package that is not installed.
    """

    pass


class LLMInvalidRequestError(LLMError):
    """The outgoing request body does not have the shape adapters expect."""

    pass


class LLMInvalidResponseError(LLMError):
    """
    The provider stream yielded an event we couldn't read at all.
    This may indicate an SDK version mismatch or a broken upstream.
    """

    pass
