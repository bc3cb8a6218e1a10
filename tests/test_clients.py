"""Tests for the metering and balance API clients."""

from datetime import date

import httpx
import pytest

from update_state import (
    Api2dBalanceClient,
    MalformedResponseError,
    NetworkError,
    OpenAIMeteringClient,
    auth_headers,
)

from conftest import RecordingTransport, json_route

USAGE_PATH = "/dashboard/billing/usage"
SUBS_PATH = "/dashboard/billing/subscription"
BALANCE_URL = "https://stream.api2d.net/dashboard/billing/credit_grants"


def make_metering(routes, api_key="sk-test"):
    transport = RecordingTransport(routes)
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    metering = OpenAIMeteringClient(
        base_url="https://api.example.com/",
        headers_factory=lambda: auth_headers(api_key),
        http_client=client,
        today=lambda: date(2024, 2, 29),
    )
    return metering, transport


def make_balance(routes):
    transport = RecordingTransport(routes)
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return Api2dBalanceClient(BALANCE_URL, lambda: auth_headers("fk-test"), client), transport


class TestOpenAIMeteringClient:
    @pytest.mark.asyncio
    async def test_usage_converts_units(self):
        metering, transport = make_metering(
            {
                USAGE_PATH: json_route({"total_usage": 1234.5}),
                SUBS_PATH: json_route({"hard_limit_usd": 120.006}),
            }
        )

        usage = await metering.usage()

        assert usage.used == pytest.approx(12.35)
        assert usage.total == pytest.approx(120.01)
        assert transport.count(USAGE_PATH) == 1
        assert transport.count(SUBS_PATH) == 1

    @pytest.mark.asyncio
    async def test_usage_query_covers_current_month(self):
        metering, transport = make_metering(
            {
                USAGE_PATH: json_route({"total_usage": 0}),
                SUBS_PATH: json_route({"hard_limit_usd": 5}),
            }
        )

        await metering.usage()

        request = next(r for r in transport.requests if r.url.path == USAGE_PATH)
        assert request.url.params["start_date"] == "2024-02-01"
        assert request.url.params["end_date"] == "2024-03-01"
        assert request.headers["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        metering, _ = make_metering(
            {
                USAGE_PATH: json_route({}, status=401),
                SUBS_PATH: json_route({"hard_limit_usd": 5}),
            }
        )

        with pytest.raises(NetworkError, match="Unauthorized"):
            await metering.usage()

    @pytest.mark.asyncio
    async def test_failed_subscription_call(self):
        metering, _ = make_metering(
            {
                USAGE_PATH: json_route({"total_usage": 10}),
                SUBS_PATH: json_route({}, status=500),
            }
        )

        with pytest.raises(NetworkError) as exc_info:
            await metering.usage()
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_error_body(self):
        metering, _ = make_metering(
            {
                USAGE_PATH: json_route(
                    {"error": {"type": "invalid_request_error", "message": "bad key"}}
                ),
                SUBS_PATH: json_route({"hard_limit_usd": 5}),
            }
        )

        with pytest.raises(NetworkError, match="bad key"):
            await metering.usage()


class TestApi2dBalanceClient:
    @pytest.mark.asyncio
    async def test_reads_total_available(self):
        balance, transport = make_balance(
            {"/dashboard/billing/credit_grants": json_route({"total_available": 200.5})}
        )

        result = await balance.check_balance()

        assert result.total_available == 200.5
        assert transport.requests[0].headers["Authorization"] == "Bearer fk-test"

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        balance, _ = make_balance(
            {"/dashboard/billing/credit_grants": json_route({}, status=502)}
        )

        with pytest.raises(NetworkError, match="502"):
            await balance.check_balance()

    @pytest.mark.asyncio
    async def test_missing_field(self):
        balance, _ = make_balance(
            {"/dashboard/billing/credit_grants": json_route({"object": "credit_summary"})}
        )

        with pytest.raises(MalformedResponseError):
            await balance.check_balance()
