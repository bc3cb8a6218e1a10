# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Small httpx helpers shared by the remote fetchers.

Translates transport and decoding failures into the library's error types
so callers only need to handle NetworkError / MalformedResponseError.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from .errors import MalformedResponseError, NetworkError

lib_logger = logging.getLogger("update_state")


@asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient],
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the shared client, or a short-lived one if none was injected."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


async def fetch(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> httpx.Response:
    """GET ``url``; transport errors become NetworkError."""
    lib_logger.debug(f"GET {url}")
    try:
        return await client.get(url, headers=headers, timeout=timeout)
    except httpx.RequestError as e:
        raise NetworkError(f"Request to {url} failed: {e}", url=url) from e


def ensure_success(response: httpx.Response) -> httpx.Response:
    if not response.is_success:
        raise NetworkError(
            f"Request failed with status: {response.status_code}",
            status_code=response.status_code,
            url=str(response.request.url),
        )
    return response


def decode_json(response: httpx.Response) -> Any:
    """Parse the body as JSON; invalid JSON becomes MalformedResponseError."""
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Invalid JSON from {response.request.url}: {e}",
            url=str(response.request.url),
        ) from e


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Any:
    """GET ``url`` and return its decoded JSON body."""
    response = ensure_success(await fetch(client, url, headers, timeout))
    return decode_json(response)
