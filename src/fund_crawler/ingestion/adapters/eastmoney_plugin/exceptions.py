"""
Eastmoney API Exception Hierarchy

Provides specific exception types for the failure classes of the fund
source, so the pipeline can log them with the right context:

- FetchError: transport/status failures, raised after the retry budget
- MalformedPayloadError: catalog or history bodies of unexpected shape
- ApiDomainError: history response with a nonzero ErrCode
- EmptyFundCodeError: catalog entry without a code
"""

from fund_crawler.shared.exceptions import FundCrawlerError


class EastmoneyAPIError(FundCrawlerError):
    """Base exception for all Eastmoney source errors."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class FetchError(EastmoneyAPIError):
    """Transport error or non-200 status after every attempt failed."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        attempts: int = 0,
    ):
        super().__init__(message, url=url)
        self.status_code = status_code
        self.attempts = attempts


class MalformedPayloadError(EastmoneyAPIError):
    """Response body does not match the expected textual/JSON shape."""

    pass


class ApiDomainError(EastmoneyAPIError):
    """History API reported a failure through a nonzero ErrCode."""

    def __init__(
        self,
        err_code: int,
        err_msg: str,
        page_index: int = 0,
        page_size: int = 0,
        url: str | None = None,
    ):
        super().__init__(
            f"fund info error, code=[{err_code}], msg=[{err_msg}], "
            f"index=[{page_index}], size=[{page_size}]",
            url=url,
        )
        self.err_code = err_code
        self.err_msg = err_msg
        self.page_index = page_index
        self.page_size = page_size


class EmptyFundCodeError(EastmoneyAPIError):
    """Catalog entry has no fund code, so no history URL can be built."""

    pass
