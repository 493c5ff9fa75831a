"""HTTP port.

The Eastmoney fetcher and the InfluxDB sink depend on this Protocol, not
on aiohttp, so tests can replay scripted responses.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class HttpResponse:
    """A fully-read response: status, decoded text body, headers, final URL."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


class IHttpClient(Protocol):
    """Transport only.

    Status interpretation, retry and payload parsing belong to callers.
    Transport failures surface as aiohttp.ClientError or
    asyncio.TimeoutError.
    """

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """GET `url` with optional query params, headers and timeout (seconds)."""
        ...

    async def post(
        self,
        url: str,
        data: str | bytes | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """POST `data` as the raw request body."""
        ...

    async def close(self) -> None:
        ...
