"""aiohttp implementation of IHttpClient.

One instance per remote service (Eastmoney, InfluxDB); each owns a single
ClientSession opened on first use and kept until close().
"""

from typing import Any

import aiohttp

from fund_crawler.ingestion.config.value_objects import HttpClientConfig
from fund_crawler.ingestion.ports.http import HttpResponse, IHttpClient


class AiohttpClient(IHttpClient):
    """Session-reusing HTTP client.

    Bodies are read to text before returning, so no connection outlives
    the call. Non-2xx statuses are returned, not raised.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        headers: dict[str, str] | None = None,
    ):
        """
        Args:
            config: Default request timeout
            headers: Sent with every request, e.g. the InfluxDB Authorization
        """
        self.config = config or HttpClientConfig()
        self.headers = dict(headers or {})
        self._session: aiohttp.ClientSession | None = None

    def _session_or_new(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers=self.headers,
            )
        return self._session

    async def _request(
        self,
        method: str,
        url: str,
        timeout: float | None,
        **kwargs: Any,
    ) -> HttpResponse:
        session = self._session_or_new()
        async with session.request(
            method,
            url,
            timeout=aiohttp.ClientTimeout(total=timeout or self.config.timeout),
            **kwargs,
        ) as resp:
            # Undecodable bytes become U+FFFD
            text = await resp.text(errors="replace")
            return HttpResponse(
                status_code=resp.status,
                body=text,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """GET `url`; see IHttpClient.get."""
        return await self._request("GET", url, timeout, params=params, headers=headers)

    async def post(
        self,
        url: str,
        data: str | bytes | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """POST a raw body to `url`; see IHttpClient.post."""
        return await self._request(
            "POST", url, timeout, data=data, params=params, headers=headers
        )

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
