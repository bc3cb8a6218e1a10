# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Constants and default values for the update state library.

All tunable defaults live here; ConfigLoader-style overrides from the
environment are applied in core/config.py.
"""

# =============================================================================
# UPSTREAM ENDPOINTS
# =============================================================================

UPSTREAM_REPO = "Yidadaa/ChatGPT-Next-Web"
FETCH_COMMIT_URL = f"https://api.github.com/repos/{UPSTREAM_REPO}/commits?per_page=1"
FETCH_TAG_URL = f"https://api.github.com/repos/{UPSTREAM_REPO}/tags?per_page=1"

# Secondary billing endpoint (prepaid balance)
API2D_BALANCE_URL = "https://stream.api2d.net/dashboard/billing/credit_grants"

# Primary metering API
DEFAULT_METERING_BASE_URL = "https://api.openai.com"
METERING_USAGE_PATH = "dashboard/billing/usage"
METERING_SUBSCRIPTION_PATH = "dashboard/billing/subscription"

DEFAULT_REQUEST_TIMEOUT = 15.0  # seconds

# =============================================================================
# STALENESS GATES (milliseconds)
# =============================================================================

ONE_MINUTE_MS = 60 * 1000
VERSION_CHECK_INTERVAL_MS = 2 * ONE_MINUTE_MS
USAGE_CHECK_INTERVAL_MS = ONE_MINUTE_MS

# =============================================================================
# DEFAULT STATE
# =============================================================================

DEFAULT_VERSION_TYPE = "tag"
DEFAULT_VERSION = "unknown"
DEFAULT_REMOTE_VERSION = ""

# =============================================================================
# PERSISTENCE
# =============================================================================

STORE_KEY = "chat-update"
STATE_SCHEMA_VERSION = 1
STATE_FILE_NAME = "update_state.json"

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VERSION_TYPE = "UPDATE_VERSION_TYPE"
ENV_COMMIT_URL = "UPDATE_COMMIT_URL"
ENV_TAG_URL = "UPDATE_TAG_URL"
ENV_BALANCE_URL = "API2D_BALANCE_URL"
ENV_METERING_BASE_URL = "OPENAI_BASE_URL"
ENV_API_KEY = "OPENAI_API_KEY"
ENV_REQUEST_TIMEOUT = "UPDATE_REQUEST_TIMEOUT"
ENV_STATE_PATH = "UPDATE_STATE_PATH"
ENV_BUILD_VERSION = "BUILD_VERSION"
ENV_BUILD_COMMIT_DATE = "BUILD_COMMIT_DATE"

# Distribution name used as a fallback source for the local version
DISTRIBUTION_NAME = "update-state"

# Logging
LIB_LOGGER_NAME = "update_state"

__all__ = [
    "UPSTREAM_REPO",
    "FETCH_COMMIT_URL",
    "FETCH_TAG_URL",
    "API2D_BALANCE_URL",
    "DEFAULT_METERING_BASE_URL",
    "METERING_USAGE_PATH",
    "METERING_SUBSCRIPTION_PATH",
    "DEFAULT_REQUEST_TIMEOUT",
    "ONE_MINUTE_MS",
    "VERSION_CHECK_INTERVAL_MS",
    "USAGE_CHECK_INTERVAL_MS",
    "DEFAULT_VERSION_TYPE",
    "DEFAULT_VERSION",
    "DEFAULT_REMOTE_VERSION",
    "STORE_KEY",
    "STATE_SCHEMA_VERSION",
    "STATE_FILE_NAME",
    "ENV_VERSION_TYPE",
    "ENV_COMMIT_URL",
    "ENV_TAG_URL",
    "ENV_BALANCE_URL",
    "ENV_METERING_BASE_URL",
    "ENV_API_KEY",
    "ENV_REQUEST_TIMEOUT",
    "ENV_STATE_PATH",
    "ENV_BUILD_VERSION",
    "ENV_BUILD_COMMIT_DATE",
    "DISTRIBUTION_NAME",
    "LIB_LOGGER_NAME",
]
