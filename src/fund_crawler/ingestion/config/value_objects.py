"""Configuration value objects for dependency injection.

Instead of injecting the whole ConfigState, inject specific configuration
dataclasses into each component. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass, field

from fund_crawler.config.state import (
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
    EastmoneyConfig,
)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 30.0


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Attempts are retried immediately; there is no backoff delay.
    """

    max_attempts: int = 3


@dataclass(frozen=True)
class EastmoneyClientConfig:
    """Configuration for the Eastmoney fetcher and adapter."""

    catalog_url: str = "http://fund.eastmoney.com/js/fundcode_search.js"
    history_url: str = "http://api.fund.eastmoney.com/f10/lsjz"
    referer: str = DEFAULT_REFERER
    user_agent: str = DEFAULT_USER_AGENT
    callback: str = "jQuer"
    page_index: int = 1
    page_size: int = 20
    http_config: HttpClientConfig = field(default_factory=HttpClientConfig)
    retry_config: RetryConfig = field(default_factory=RetryConfig)

    @property
    def headers(self) -> dict[str, str]:
        """Fixed headers sent on every request; the API rejects default agents."""
        return {"Referer": self.referer, "User-Agent": self.user_agent}

    @classmethod
    def from_state(cls, config: EastmoneyConfig) -> "EastmoneyClientConfig":
        return cls(
            catalog_url=config.catalog_url,
            history_url=config.history_url,
            referer=config.referer,
            user_agent=config.user_agent,
            callback=config.callback,
            page_index=config.page_index,
            page_size=config.page_size,
            http_config=HttpClientConfig(timeout=config.timeout),
            retry_config=RetryConfig(max_attempts=config.max_attempts),
        )
