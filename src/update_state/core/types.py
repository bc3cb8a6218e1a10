# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Shared type definitions for the update state library.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VersionType(str, Enum):
    """Versioning scheme used to identify a build."""

    DATE = "date"  # Upstream commit timestamp (epoch ms string)
    TAG = "tag"  # Released tag name

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["VersionType"]:
        """Return the matching member, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass
class BuildInfo:
    """Local build identifiers, one per versioning scheme."""

    version: Optional[str] = None
    commit_date: Optional[str] = None  # epoch ms as string

    def for_type(self, version_type: VersionType) -> Optional[str]:
        if version_type == VersionType.DATE:
            return self.commit_date
        return self.version


@dataclass
class UsageInfo:
    """Quota usage reported by the primary metering API."""

    used: Optional[float]
    total: Optional[float]


@dataclass
class BalanceInfo:
    """Prepaid balance reported by the secondary billing endpoint."""

    total_available: float


__all__ = ["VersionType", "BuildInfo", "UsageInfo", "BalanceInfo"]
