"""Tests for upstream version resolution."""

import httpx
import pytest

from update_state import (
    MalformedResponseError,
    NetworkError,
    VersionResolver,
    VersionType,
)
from update_state.version.resolver import commit_date_to_id

from conftest import RecordingTransport, json_route

COMMITS = "https://api.github.com/repos/acme/app/commits"
TAGS = "https://api.github.com/repos/acme/app/tags"


def make_resolver(routes):
    transport = RecordingTransport(routes)
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return VersionResolver(COMMITS, TAGS, http_client=client), transport


def test_commit_date_to_id():
    assert commit_date_to_id("2023-11-14T22:13:20Z") == "1700000000000"
    assert commit_date_to_id("2023-11-14T22:13:20+00:00") == "1700000000000"


def test_commit_date_to_id_keeps_milliseconds():
    assert commit_date_to_id("2023-11-14T22:13:20.999Z") == "1700000000999"
    assert commit_date_to_id("2023-11-15T00:13:20.001+02:00") == "1700000000001"


@pytest.mark.asyncio
async def test_date_mode_uses_first_commit():
    commits = [
        {"sha": "b", "commit": {"author": {"name": "x", "date": "2023-11-14T22:13:20Z"}}},
        {"sha": "a", "commit": {"author": {"name": "x", "date": "2020-01-01T00:00:00Z"}}},
    ]
    resolver, transport = make_resolver({"/repos/acme/app/commits": json_route(commits)})

    assert await resolver.get_version(VersionType.DATE) == "1700000000000"
    assert transport.count("/repos/acme/app/commits") == 1


@pytest.mark.asyncio
async def test_date_mode_empty_is_error():
    resolver, _ = make_resolver({"/repos/acme/app/commits": json_route([])})

    with pytest.raises(MalformedResponseError):
        await resolver.get_version(VersionType.DATE)


@pytest.mark.asyncio
async def test_date_mode_missing_date_is_error():
    resolver, _ = make_resolver(
        {"/repos/acme/app/commits": json_route([{"commit": {"author": {}}}])}
    )

    with pytest.raises(MalformedResponseError):
        await resolver.get_version(VersionType.DATE)


@pytest.mark.asyncio
async def test_tag_mode_uses_first_tag():
    tags = [{"name": "v2.10.1"}, {"name": "v2.10.0"}]
    resolver, transport = make_resolver({"/repos/acme/app/tags": json_route(tags)})

    assert await resolver.get_version(VersionType.TAG) == "v2.10.1"
    assert transport.count("/repos/acme/app/commits") == 0


@pytest.mark.asyncio
async def test_tag_mode_empty_returns_none():
    resolver, _ = make_resolver({"/repos/acme/app/tags": json_route([])})

    assert await resolver.get_version(VersionType.TAG) is None


@pytest.mark.asyncio
async def test_error_status_is_network_error():
    resolver, _ = make_resolver(
        {"/repos/acme/app/tags": json_route({"message": "rate limited"}, status=403)}
    )

    with pytest.raises(NetworkError) as exc_info:
        await resolver.get_version(VersionType.TAG)
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    resolver, _ = make_resolver({"/repos/acme/app/tags": boom})

    with pytest.raises(NetworkError):
        await resolver.get_version(VersionType.TAG)


@pytest.mark.asyncio
async def test_non_list_payload_is_malformed():
    resolver, _ = make_resolver({"/repos/acme/app/tags": json_route({"name": "v1"})})

    with pytest.raises(MalformedResponseError):
        await resolver.get_version(VersionType.TAG)
