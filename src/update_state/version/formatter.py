# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Version display formatting.

Raw identifiers differ per scheme: ``date`` builds are identified by an
epoch-millisecond string, ``tag`` builds by a tag name. Each raw value is
wrapped in a small tagged variant so callers never branch on the scheme.
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union

from ..core.types import VersionType

# What an invalid timestamp renders as; matches the NaN fields of a broken date
INVALID_DATE_DISPLAY = "NaNNaNNaN"

# Largest epoch offset a date can hold: 100,000,000 days either side
MAX_TIME_MS = 8.64e15
_MS_PER_DAY = 86_400_000


def _civil_from_days(days: int) -> Tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for a day count since 1970-01-01."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_version_date(raw: str) -> str:
    """
    Render an epoch-ms string as ``YYYYMMDD`` in UTC.

    Never raises: blank input counts as 0, anything unparsable or out of
    range renders as INVALID_DATE_DISPLAY.
    """
    text = str(raw).strip()
    try:
        millis = float(text) if text else 0.0
    except ValueError:
        return INVALID_DATE_DISPLAY
    if not math.isfinite(millis) or abs(millis) > MAX_TIME_MS:
        return INVALID_DATE_DISPLAY

    year, month, day = _civil_from_days(math.trunc(millis) // _MS_PER_DAY)
    return f"{year}{month:02d}{day:02d}"


@dataclass(frozen=True)
class DateVersion:
    """Build identified by upstream commit time."""

    raw: str

    def display(self) -> str:
        return format_version_date(self.raw)


@dataclass(frozen=True)
class TagVersion:
    """Build identified by a released tag name."""

    raw: str

    def display(self) -> str:
        return self.raw


Version = Union[DateVersion, TagVersion]


def make_version(version_type: VersionType, raw: str) -> Version:
    if version_type == VersionType.DATE:
        return DateVersion(raw)
    return TagVersion(raw)


def format_version(version_type: VersionType, raw: str) -> str:
    """Comparable display form of ``raw`` under ``version_type``."""
    return make_version(version_type, raw).display()
