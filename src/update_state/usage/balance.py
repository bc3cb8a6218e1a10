# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Secondary billing endpoint client (api2d prepaid balance).

Independent of the primary metering API; no staleness gate applies.
"""

import logging
from typing import Callable, Dict, Optional

import httpx

from ..core.config import auth_headers
from ..core.constants import API2D_BALANCE_URL, DEFAULT_REQUEST_TIMEOUT
from ..core.errors import MalformedResponseError
from ..core.http import client_scope, get_json
from ..core.types import BalanceInfo

lib_logger = logging.getLogger("update_state")


class Api2dBalanceClient:
    def __init__(
        self,
        url: str = API2D_BALANCE_URL,
        headers_factory: Callable[[], Dict[str, str]] = auth_headers,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.url = url
        self._headers_factory = headers_factory
        self._client = http_client
        self._timeout = timeout

    async def check_balance(self) -> BalanceInfo:
        """
        Fetch the available balance.

        Raises:
            NetworkError: on transport failure or non-success status
            MalformedResponseError: if ``total_available`` is missing
        """
        async with client_scope(self._client) as client:
            data = await get_json(
                client,
                self.url,
                headers=self._headers_factory(),
                timeout=self._timeout,
            )

        value = data.get("total_available") if isinstance(data, dict) else None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedResponseError(
                "Balance response has no numeric 'total_available'", url=self.url
            )
        lib_logger.debug(f"Api2d balance: {value}")
        return BalanceInfo(total_available=value)
