"""
Tests for EastmoneyFundAdapter: request building, parsing hand-off and
domain error detection.
"""

from urllib.parse import parse_qs, urlsplit

import pytest

from fund_crawler.ingestion.adapters.eastmoney_plugin import (
    ApiDomainError,
    EastmoneyClient,
    EastmoneyFundAdapter,
    EmptyFundCodeError,
    FetchError,
    MalformedPayloadError,
    cache_buster,
)
from fund_crawler.ingestion.config.value_objects import EastmoneyClientConfig
from tests.fixtures import (
    CATALOG_BODY,
    FakeHttpClient,
    create_fund,
    create_history_body,
    create_history_record,
    http_response,
)


def make_adapter(http: FakeHttpClient) -> EastmoneyFundAdapter:
    config = EastmoneyClientConfig()
    return EastmoneyFundAdapter(EastmoneyClient(config, http), config)


class TestCacheBuster:
    def test_is_two_seconds_back_minus_random_millis(self):
        now = 1_700_000_000.7
        for _ in range(50):
            value = cache_buster(now)
            assert (1_700_000_000 - 2) * 1000 - 999 <= value <= (1_700_000_000 - 2) * 1000


class TestHistoryUrl:
    def test_first_page_of_twenty(self):
        adapter = make_adapter(FakeHttpClient(http_response()))

        url = adapter.history_url("000001", timestamp=123)
        parts = urlsplit(url)
        query = parse_qs(parts.query, keep_blank_values=True)

        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "http://api.fund.eastmoney.com/f10/lsjz"
        )
        assert query == {
            "callback": ["jQuer"],
            "fundCode": ["000001"],
            "pageIndex": ["1"],
            "pageSize": ["20"],
            "startDate": [""],
            "endDate": [""],
            "_": ["123"],
        }


class TestFetchCatalog:
    @pytest.mark.asyncio
    async def test_fetches_catalog_endpoint(self):
        http = FakeHttpClient(http_response(CATALOG_BODY))
        adapter = make_adapter(http)

        funds = await adapter.fetch_catalog()

        assert [f.code for f in funds] == ["001", "002"]
        assert http.get_calls[0]["url"] == (
            "http://fund.eastmoney.com/js/fundcode_search.js"
        )

    @pytest.mark.asyncio
    async def test_malformed_catalog_propagates(self):
        adapter = make_adapter(FakeHttpClient(http_response("<html></html>")))

        with pytest.raises(MalformedPayloadError):
            await adapter.fetch_catalog()


class TestFetchHistory:
    @pytest.mark.asyncio
    async def test_returns_parsed_history(self):
        body = create_history_body([create_history_record()])
        http = FakeHttpClient(http_response(body))
        adapter = make_adapter(http)

        history = await adapter.fetch_history(create_fund("000001"))

        assert len(history.records) == 1
        assert "fundCode=000001" in http.get_calls[0]["url"]

    @pytest.mark.asyncio
    async def test_nonzero_err_code_is_domain_error(self):
        body = create_history_body([], err_code=-999, err_msg="系统繁忙")
        http = FakeHttpClient(http_response(body))
        adapter = make_adapter(http)

        with pytest.raises(ApiDomainError) as exc_info:
            await adapter.fetch_history(create_fund("000001"))

        error = exc_info.value
        assert error.err_code == -999
        assert error.err_msg == "系统繁忙"
        assert error.page_index == 1
        assert error.page_size == 20
        assert "code=[-999]" in str(error)
        # Domain errors are not retried
        assert len(http.get_calls) == 1

    @pytest.mark.asyncio
    async def test_empty_code_makes_no_request(self):
        http = FakeHttpClient(http_response())
        adapter = make_adapter(http)

        with pytest.raises(EmptyFundCodeError):
            await adapter.fetch_history(create_fund(""))

        assert http.get_calls == []

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self):
        http = FakeHttpClient(http_response(status=502))
        adapter = make_adapter(http)

        with pytest.raises(FetchError):
            await adapter.fetch_history(create_fund("000001"))
