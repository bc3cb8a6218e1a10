# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Usage polling package.

Components:
    StalenessGate: Minimum-interval refresh policy
    OpenAIMeteringClient: Primary metering API (quota used / total)
    Api2dBalanceClient: Secondary billing endpoint (prepaid balance)
"""

from .gate import StalenessGate, should_refresh, now_ms
from .metering import MeteringClient, OpenAIMeteringClient
from .balance import Api2dBalanceClient

__all__ = [
    "StalenessGate",
    "should_refresh",
    "now_ms",
    "MeteringClient",
    "OpenAIMeteringClient",
    "Api2dBalanceClient",
]
