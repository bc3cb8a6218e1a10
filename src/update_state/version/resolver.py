# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Upstream version resolution.

Fetches the newest upstream identifier in the raw form of the active
versioning scheme:

- date: first (newest) commit's author date, as an epoch-ms string
- tag:  first (newest) tag's name, or None when no tags exist
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import httpx

from ..core.constants import DEFAULT_REQUEST_TIMEOUT, FETCH_COMMIT_URL, FETCH_TAG_URL
from ..core.errors import MalformedResponseError
from ..core.http import client_scope, get_json
from ..core.types import VersionType

lib_logger = logging.getLogger("update_state")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def commit_date_to_id(value: str) -> str:
    """
    Convert an ISO-8601 commit date to an epoch-ms string.

    Raises:
        ValueError: if the date cannot be parsed
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return str((parsed - _EPOCH) // timedelta(milliseconds=1))


def _as_list(data: Any, url: str) -> List[Any]:
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Expected a list from {url}, got {type(data).__name__}", url=url
        )
    return data


class VersionResolver:
    """
    Looks up the latest upstream version for either versioning scheme.

    An httpx.AsyncClient can be injected to share connections; otherwise a
    client is opened per lookup.
    """

    def __init__(
        self,
        commit_url: str = FETCH_COMMIT_URL,
        tag_url: str = FETCH_TAG_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.commit_url = commit_url
        self.tag_url = tag_url
        self._client = http_client
        self._timeout = timeout

    async def get_version(self, version_type: VersionType) -> Optional[str]:
        """
        Fetch the latest upstream identifier for ``version_type``.

        Raises:
            NetworkError: on transport failure or non-success status
            MalformedResponseError: on an unexpected payload
        """
        if version_type == VersionType.DATE:
            return await self.fetch_latest_commit_id()
        return await self.fetch_latest_tag()

    async def fetch_latest_commit_id(self) -> str:
        url = self.commit_url
        async with client_scope(self._client) as client:
            data = _as_list(await get_json(client, url, timeout=self._timeout), url)

        if not data:
            raise MalformedResponseError(f"No commits returned from {url}", url=url)

        try:
            date = data[0]["commit"]["author"]["date"]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(
                f"Commit record is missing author date: {e}", url=url
            ) from e
        if not isinstance(date, str):
            raise MalformedResponseError("Commit author date is not a string", url=url)

        try:
            return commit_date_to_id(date)
        except ValueError as e:
            raise MalformedResponseError(
                f"Unparsable commit date {date!r}", url=url
            ) from e

    async def fetch_latest_tag(self) -> Optional[str]:
        url = self.tag_url
        async with client_scope(self._client) as client:
            data = _as_list(await get_json(client, url, timeout=self._timeout), url)

        if not data:
            lib_logger.debug(f"No tags published at {url}")
            return None

        first = data[0]
        name = first.get("name") if isinstance(first, dict) else None
        if not isinstance(name, str):
            raise MalformedResponseError("Tag record has no name", url=url)
        return name
