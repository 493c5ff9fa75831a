"""
Tests for EastmoneyClient: fixed headers and the bounded, immediate retry.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from fund_crawler.ingestion.adapters.eastmoney_plugin import EastmoneyClient, FetchError
from fund_crawler.ingestion.config.value_objects import (
    EastmoneyClientConfig,
    RetryConfig,
)
from tests.fixtures import FakeHttpClient, http_response

URL = "http://fund.eastmoney.com/js/fundcode_search.js"


@pytest.fixture
def config():
    return EastmoneyClientConfig()


class TestEastmoneyClientFetch:
    @pytest.mark.asyncio
    async def test_returns_first_successful_response(self, config):
        http = FakeHttpClient(http_response("var r = [];"))
        client = EastmoneyClient(config, http)

        response = await client.fetch(URL)

        assert response.body == "var r = [];"
        assert len(http.get_calls) == 1

    @pytest.mark.asyncio
    async def test_query_string_travels_in_the_url(self, config):
        http = FakeHttpClient(http_response("ok"))
        client = EastmoneyClient(config, http)
        url = "http://api.fund.eastmoney.com/f10/lsjz?fundCode=000001&pageIndex=1"

        await client.fetch(url)

        [call] = http.get_calls
        assert call["url"] == url
        assert call["params"] is None

    @pytest.mark.asyncio
    async def test_sends_fixed_referer_and_user_agent(self, config):
        http = FakeHttpClient(http_response("ok"))
        client = EastmoneyClient(config, http)

        await client.fetch(URL)

        headers = http.get_calls[0]["headers"]
        assert headers["Referer"] == "http://fund.eastmoney.com/f10/jjjz_519961.html"
        assert "Chrome/74.0.3729.169" in headers["User-Agent"]
        assert headers["User-Agent"].startswith("Mozilla/5.0")

    @pytest.mark.asyncio
    async def test_status_500_exhausts_after_exactly_three_attempts(self, config):
        http = FakeHttpClient(http_response("boom", status=500))
        client = EastmoneyClient(config, http)

        with pytest.raises(FetchError) as exc_info:
            await client.fetch(URL)

        assert len(http.get_calls) == 3
        assert exc_info.value.status_code == 500
        assert exc_info.value.attempts == 3
        assert exc_info.value.url == URL
        assert URL in str(exc_info.value)
        assert "code=[500]" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_request_after_exhaustion(self, config):
        http = FakeHttpClient(http_response(status=503))
        client = EastmoneyClient(config, http)

        with pytest.raises(FetchError):
            await client.fetch(URL)
        calls_after_failure = len(http.get_calls)

        assert calls_after_failure == 3
        assert len(http.get_calls) == calls_after_failure

    @pytest.mark.asyncio
    async def test_transport_error_then_success(self, config):
        http = FakeHttpClient(
            aiohttp.ClientConnectionError("reset"),
            asyncio.TimeoutError(),
            http_response("ok"),
        )
        client = EastmoneyClient(config, http)

        response = await client.fetch(URL)

        assert response.body == "ok"
        assert len(http.get_calls) == 3

    @pytest.mark.asyncio
    async def test_transport_errors_exhaust_with_detail(self, config):
        http = FakeHttpClient(aiohttp.ClientConnectionError("connection refused"))
        client = EastmoneyClient(config, http)

        with pytest.raises(FetchError) as exc_info:
            await client.fetch(URL)

        assert len(http.get_calls) == 3
        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_each_call_gets_a_fresh_budget(self, config):
        http = FakeHttpClient(
            http_response(status=500),
            http_response(status=500),
            http_response("first"),
            http_response(status=500),
            http_response(status=500),
            http_response("second"),
        )
        client = EastmoneyClient(config, http)

        assert (await client.fetch(URL)).body == "first"
        assert (await client.fetch(URL)).body == "second"
        assert len(http.get_calls) == 6

    @pytest.mark.asyncio
    async def test_retries_without_sleeping(self, config):
        http = FakeHttpClient(http_response(status=500))
        client = EastmoneyClient(config, http)

        with patch("asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(FetchError):
                await client.fetch(URL)

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attempt_budget_comes_from_config(self):
        config = EastmoneyClientConfig(retry_config=RetryConfig(max_attempts=5))
        http = FakeHttpClient(http_response(status=404))
        client = EastmoneyClient(config, http)

        with pytest.raises(FetchError):
            await client.fetch(URL)

        assert len(http.get_calls) == 5
