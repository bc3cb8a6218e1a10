# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Core package for the update state library.

Provides shared infrastructure used by the version and usage packages:
- types: Shared dataclasses and enums
- errors: All custom exceptions
- config: UpdateStateConfig and the build configuration provider
- constants: Default values and fixed endpoints
"""

from .types import VersionType, BuildInfo, UsageInfo, BalanceInfo

from .errors import (
    UpdateStateError,
    NetworkError,
    MalformedResponseError,
    ConfigMissingError,
)

from .config import UpdateStateConfig, auth_headers, load_build_info

__all__ = [
    # Types
    "VersionType",
    "BuildInfo",
    "UsageInfo",
    "BalanceInfo",
    # Errors
    "UpdateStateError",
    "NetworkError",
    "MalformedResponseError",
    "ConfigMissingError",
    # Config
    "UpdateStateConfig",
    "auth_headers",
    "load_build_info",
]
