# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Update state persistence."""

from .storage import StateStorage

__all__ = ["StateStorage"]
