# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Primary metering API client.

Reports quota used and quota total for the current billing month from the
OpenAI-style dashboard billing endpoints.
"""

import asyncio
import logging
import math
from datetime import date, timedelta
from typing import Any, Callable, Dict, Optional, Protocol

import httpx

from ..core.config import auth_headers
from ..core.constants import (
    DEFAULT_METERING_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    METERING_SUBSCRIPTION_PATH,
    METERING_USAGE_PATH,
)
from ..core.errors import MalformedResponseError, NetworkError
from ..core.http import client_scope, decode_json, ensure_success, fetch
from ..core.types import UsageInfo

lib_logger = logging.getLogger("update_state")

HeadersFactory = Callable[[], Dict[str, str]]


class MeteringClient(Protocol):
    """Anything that can report quota usage."""

    async def usage(self) -> Optional[UsageInfo]: ...


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _number(body: Dict[str, Any], key: str, url: str) -> Optional[float]:
    value = body.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(f"'{key}' is not a number", url=url)
    return value


class OpenAIMeteringClient:
    """
    Queries usage and subscription in parallel.

    ``used`` is reported by the API in cents and converted to dollars;
    ``total`` is the subscription hard limit rounded to cents.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_METERING_BASE_URL,
        headers_factory: HeadersFactory = auth_headers,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        today: Callable[[], date] = date.today,
    ):
        self.base_url = base_url.rstrip("/")
        self._headers_factory = headers_factory
        self._client = http_client
        self._timeout = timeout
        self._today = today

    def _usage_url(self) -> str:
        today = self._today()
        start = today.replace(day=1)
        end = today + timedelta(days=1)
        return (
            f"{self.base_url}/{METERING_USAGE_PATH}"
            f"?start_date={start.isoformat()}&end_date={end.isoformat()}"
        )

    async def usage(self) -> Optional[UsageInfo]:
        """
        Fetch quota usage for the current month.

        Raises:
            NetworkError: unauthorized, non-success status, or API error body
            MalformedResponseError: unexpected payload
        """
        usage_url = self._usage_url()
        subs_url = f"{self.base_url}/{METERING_SUBSCRIPTION_PATH}"
        headers = self._headers_factory()

        async with client_scope(self._client) as client:
            used_resp, subs_resp = await asyncio.gather(
                fetch(client, usage_url, headers, self._timeout),
                fetch(client, subs_url, headers, self._timeout),
            )

        if used_resp.status_code == 401:
            raise NetworkError("Unauthorized", status_code=401, url=usage_url)
        ensure_success(used_resp)
        ensure_success(subs_resp)

        usage_body = decode_json(used_resp)
        subs_body = decode_json(subs_resp)
        if not isinstance(usage_body, dict) or not isinstance(subs_body, dict):
            raise MalformedResponseError("Billing response is not an object")

        error = usage_body.get("error")
        if isinstance(error, dict) and error.get("type"):
            raise NetworkError(
                str(error.get("message") or error["type"]),
                status_code=used_resp.status_code,
                url=usage_url,
            )

        used = _number(usage_body, "total_usage", usage_url)
        total = _number(subs_body, "hard_limit_usd", subs_url)
        if used:
            used = _round_half_up(used) / 100
        if total:
            total = _round_half_up(total, 2)

        lib_logger.debug(f"Metering usage: used={used}, total={total}")
        return UsageInfo(used=used, total=total)
