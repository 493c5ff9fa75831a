"""
Eastmoney fund adapter.

Builds catalog and history requests, fetches them through EastmoneyClient
and hands the bodies to the parsers. Only the first history page is
requested: page index and size come from config (1 and 20 by default)
and TotalCount is never followed.
"""

import random
import time
from urllib.parse import urlencode

from fund_crawler.infrastructure.observability import get_ingestion_logger
from fund_crawler.ingestion.config.value_objects import EastmoneyClientConfig
from fund_crawler.shared.models.funds import FundInstrument, HistoryResponse

from .catalog_parser import parse_catalog
from .client import EastmoneyClient
from .exceptions import ApiDomainError, EmptyFundCodeError
from .history_parser import parse_history


def cache_buster(now: float | None = None) -> int:
    """Millisecond timestamp a little in the past, like the site's own jQuery calls."""
    now = time.time() if now is None else now
    return (int(now) - 2) * 1000 - random.randrange(1000)


class EastmoneyFundAdapter:
    """Catalog discovery and history retrieval for Eastmoney funds."""

    def __init__(self, client: EastmoneyClient, config: EastmoneyClientConfig):
        self.client = client
        self.config = config
        self.log = get_ingestion_logger("eastmoney-adapter", source="eastmoney")

    def history_url(self, code: str, timestamp: int | None = None) -> str:
        """Full history URL for one fund, first page only."""
        params = {
            "callback": self.config.callback,
            "fundCode": code,
            "pageIndex": self.config.page_index,
            "pageSize": self.config.page_size,
            "startDate": "",
            "endDate": "",
            "_": cache_buster() if timestamp is None else timestamp,
        }
        return f"{self.config.history_url}?{urlencode(params)}"

    async def fetch_catalog(self) -> list[FundInstrument]:
        """
        Discover the full fund catalog.

        Raises:
            FetchError: Catalog endpoint unreachable after retries
            MalformedPayloadError: Catalog body is not the expected script
        """
        response = await self.client.fetch(self.config.catalog_url)
        funds = parse_catalog(response.body)
        self.log.info("catalog_discovered", funds=len(funds))
        return funds

    async def fetch_history(self, fund: FundInstrument) -> HistoryResponse:
        """
        Fetch and parse the first history page of one fund.

        Raises:
            EmptyFundCodeError: Fund has no code
            FetchError: History endpoint unreachable after retries
            MalformedPayloadError: Body is not a history envelope
            ApiDomainError: Envelope carries a nonzero ErrCode
        """
        if not fund.code:
            raise EmptyFundCodeError("empty fund code")

        url = self.history_url(fund.code)
        response = await self.client.fetch(url)
        self.log.debug("fund_fetched", code=fund.code, name=fund.name)

        history = parse_history(response.body)
        if history.is_error:
            raise ApiDomainError(
                history.err_code,
                history.err_msg,
                page_index=history.page_index,
                page_size=history.page_size,
                url=url,
            )
        return history
