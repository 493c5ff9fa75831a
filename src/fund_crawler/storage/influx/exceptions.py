"""InfluxDB sink errors."""

from fund_crawler.shared.exceptions import FundCrawlerError


class SinkWriteError(FundCrawlerError):
    """InfluxDB answered a write with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
