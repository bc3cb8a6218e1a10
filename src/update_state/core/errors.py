# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Error types for the update state library.

Refresh operations on UpdateStore catch these internally and log them;
they only reach callers that use the resolver or API clients directly.
"""

from typing import Optional


class UpdateStateError(Exception):
    """Base class for all update state errors."""


class NetworkError(UpdateStateError):
    """
    Transport failure or non-success HTTP status.

    Attributes:
        status_code: HTTP status, or None if no response was received
        url: Requested URL, if known
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedResponseError(UpdateStateError):
    """Response body did not have the expected shape."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ConfigMissingError(UpdateStateError):
    """Local build configuration is not available."""


__all__ = [
    "UpdateStateError",
    "NetworkError",
    "MalformedResponseError",
    "ConfigMissingError",
]
