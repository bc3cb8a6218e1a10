# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Version formatting and upstream version resolution."""

from .formatter import (
    INVALID_DATE_DISPLAY,
    DateVersion,
    TagVersion,
    Version,
    format_version,
    format_version_date,
    make_version,
)
from .resolver import VersionResolver, commit_date_to_id

__all__ = [
    "INVALID_DATE_DISPLAY",
    "DateVersion",
    "TagVersion",
    "Version",
    "format_version",
    "format_version_date",
    "make_version",
    "VersionResolver",
    "commit_date_to_id",
]
