# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Configuration for the update state library.

Configuration is resolved in this order (later overrides earlier):
1. System defaults (core/constants.py)
2. Environment variables

Also provides the build configuration provider (local version and commit
date) and the header factory used for authenticated billing requests.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from importlib import metadata
from pathlib import Path
from typing import Dict, Optional

from .constants import (
    API2D_BALANCE_URL,
    DEFAULT_METERING_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_VERSION_TYPE,
    DISTRIBUTION_NAME,
    ENV_API_KEY,
    ENV_BALANCE_URL,
    ENV_BUILD_COMMIT_DATE,
    ENV_BUILD_VERSION,
    ENV_COMMIT_URL,
    ENV_METERING_BASE_URL,
    ENV_REQUEST_TIMEOUT,
    ENV_STATE_PATH,
    ENV_TAG_URL,
    ENV_VERSION_TYPE,
    FETCH_COMMIT_URL,
    FETCH_TAG_URL,
    STATE_FILE_NAME,
)
from .errors import ConfigMissingError
from .types import BuildInfo, VersionType

lib_logger = logging.getLogger("update_state")


def env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get a non-empty string from environment variable."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_float(key: str, default: float) -> float:
    """Get float from environment variable, falling back on parse errors."""
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        lib_logger.warning(f"Invalid {key}={raw!r}, using default {default}")
        return default


@dataclass
class UpdateStateConfig:
    """
    Settings used to wire an UpdateStore.

    The version type is configured once per process; it is not meant to be
    toggled at runtime.
    """

    version_type: VersionType = VersionType(DEFAULT_VERSION_TYPE)
    commit_url: str = FETCH_COMMIT_URL
    tag_url: str = FETCH_TAG_URL
    balance_url: str = API2D_BALANCE_URL
    metering_base_url: str = DEFAULT_METERING_BASE_URL
    api_key: Optional[str] = field(default=None, repr=False)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    state_path: Path = field(default_factory=lambda: Path(STATE_FILE_NAME))

    @classmethod
    def from_env(cls) -> "UpdateStateConfig":
        """Build a config from defaults plus environment overrides."""
        raw_type = env_str(ENV_VERSION_TYPE, DEFAULT_VERSION_TYPE)
        version_type = VersionType.parse(raw_type)
        if version_type is None:
            lib_logger.warning(
                f"Unknown {ENV_VERSION_TYPE}={raw_type!r}, "
                f"falling back to '{DEFAULT_VERSION_TYPE}'"
            )
            version_type = VersionType(DEFAULT_VERSION_TYPE)

        return cls(
            version_type=version_type,
            commit_url=env_str(ENV_COMMIT_URL, FETCH_COMMIT_URL),
            tag_url=env_str(ENV_TAG_URL, FETCH_TAG_URL),
            balance_url=env_str(ENV_BALANCE_URL, API2D_BALANCE_URL),
            metering_base_url=env_str(ENV_METERING_BASE_URL, DEFAULT_METERING_BASE_URL),
            api_key=env_str(ENV_API_KEY),
            request_timeout=env_float(ENV_REQUEST_TIMEOUT, DEFAULT_REQUEST_TIMEOUT),
            state_path=Path(env_str(ENV_STATE_PATH, STATE_FILE_NAME)),
        )


def auth_headers(api_key: Optional[str] = None) -> Dict[str, str]:
    """Headers for requests against the metering and billing endpoints."""
    headers = {
        "Content-Type": "application/json",
        "x-requested-with": "XMLHttpRequest",
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


# =============================================================================
# BUILD CONFIGURATION PROVIDER
# =============================================================================


def _distribution_version() -> Optional[str]:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return None


def _git_commit_date(cwd: Optional[Path] = None) -> Optional[str]:
    """Return the HEAD commit time as an epoch-ms string, or None."""
    try:
        result = subprocess.run(
            ["git", "log", "-1", "--format=%at"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=5,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        lib_logger.debug(f"Could not read commit date from git: {e}")
        return None
    seconds = result.stdout.strip()
    if not seconds.isdigit():
        return None
    return str(int(seconds) * 1000)


def load_build_info() -> BuildInfo:
    """
    Read the local build identifiers.

    BUILD_VERSION / BUILD_COMMIT_DATE win; otherwise the installed
    distribution version and the git HEAD commit time are used.

    Raises:
        ConfigMissingError: if neither identifier can be determined
    """
    version = env_str(ENV_BUILD_VERSION) or _distribution_version()
    commit_date = env_str(ENV_BUILD_COMMIT_DATE) or _git_commit_date()

    if version is None and commit_date is None:
        raise ConfigMissingError(
            f"No build info: set {ENV_BUILD_VERSION} or {ENV_BUILD_COMMIT_DATE}"
        )
    return BuildInfo(version=version, commit_date=commit_date)


__all__ = [
    "env_str",
    "env_float",
    "UpdateStateConfig",
    "auth_headers",
    "load_build_info",
]
