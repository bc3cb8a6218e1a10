# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Update and usage state tracking.

Public API:
    UpdateStore: Persisted container with the three refresh operations
    UpdateStateConfig: Settings, loadable from the environment

Components (for advanced usage):
    VersionResolver: Latest upstream commit / tag lookup
    StalenessGate: Minimum-interval refresh policy
    OpenAIMeteringClient: Primary metering API client
    Api2dBalanceClient: Secondary billing endpoint client
    StateStorage: JSON file persistence
"""

# Core first (no dependencies on other modules)
from .core import (
    VersionType,
    BuildInfo,
    UsageInfo,
    BalanceInfo,
    UpdateStateError,
    NetworkError,
    MalformedResponseError,
    ConfigMissingError,
    UpdateStateConfig,
    auth_headers,
    load_build_info,
)

# Components
from .version import (
    DateVersion,
    TagVersion,
    VersionResolver,
    format_version,
    format_version_date,
    make_version,
)
from .usage import (
    StalenessGate,
    should_refresh,
    MeteringClient,
    OpenAIMeteringClient,
    Api2dBalanceClient,
)
from .persistence import StateStorage

# Main facade (imports components above)
from .store import UpdateStore

__all__ = [
    # Main public API
    "UpdateStore",
    "UpdateStateConfig",
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
    # Config helpers
    "auth_headers",
    "load_build_info",
    # Version
    "DateVersion",
    "TagVersion",
    "VersionResolver",
    "format_version",
    "format_version_date",
    "make_version",
    # Usage
    "StalenessGate",
    "should_refresh",
    "MeteringClient",
    "OpenAIMeteringClient",
    "Api2dBalanceClient",
    # Persistence
    "StateStorage",
]
