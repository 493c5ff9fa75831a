import asyncio

import aiohttp

from fund_crawler.infrastructure.observability import get_ingestion_logger
from fund_crawler.ingestion.config.value_objects import EastmoneyClientConfig
from fund_crawler.ingestion.ports.http import HttpResponse, IHttpClient

from .exceptions import FetchError


class EastmoneyClient:
    """Async fetcher for the Eastmoney fund site.

    Single Responsibility: Send GET requests with the fixed browser headers
    and a bounded, immediate retry on transport failures.

    Dependencies injected (not instantiated):
    - http_client: Executes HTTP requests
    """

    def __init__(self, config: EastmoneyClientConfig, http_client: IHttpClient):
        """Initialize EastmoneyClient with injected dependencies.

        Args:
            config: Endpoints, headers and retry budget
            http_client: HTTP client implementation (e.g., AiohttpClient)
        """
        self.config = config
        self.http_client = http_client
        self.log = get_ingestion_logger("eastmoney-client", source="eastmoney")

    async def fetch(self, url: str) -> HttpResponse:
        """Fetch a URL, retrying transport failures immediately.

        An attempt fails when the transport raises or the status is not 200.
        Every call gets its own fresh attempt budget.

        Args:
            url: Endpoint URL, query string included

        Returns:
            HttpResponse of the first successful attempt

        Raises:
            FetchError: After max_attempts failed attempts, carrying the URL
                and the last status or transport detail
        """
        max_attempts = self.config.retry_config.max_attempts
        error: FetchError | None = None

        for attempt_number in range(1, max_attempts + 1):
            try:
                response = await self.http_client.get(
                    url,
                    headers=self.config.headers,
                    timeout=self.config.http_config.timeout,
                )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                error = FetchError(
                    f"http get error, err=[{e!r}], url=[{url}]",
                    url=url,
                    attempts=attempt_number,
                )
            else:
                if response.status_code == 200:
                    return response
                error = FetchError(
                    f"http code error, code=[{response.status_code}], url=[{url}]",
                    url=url,
                    status_code=response.status_code,
                    attempts=attempt_number,
                )

            self.log.warning(
                "fetch_attempt_failed",
                url=url,
                attempt=attempt_number,
                max_attempts=max_attempts,
                status_code=error.status_code,
                error=str(error),
            )

        raise error
