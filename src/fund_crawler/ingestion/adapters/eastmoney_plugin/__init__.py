"""Eastmoney fund source: fetcher, parsers and adapter."""

from .adapter import EastmoneyFundAdapter, cache_buster
from .catalog_parser import parse_catalog
from .client import EastmoneyClient
from .exceptions import (
    ApiDomainError,
    EastmoneyAPIError,
    EmptyFundCodeError,
    FetchError,
    MalformedPayloadError,
)
from .history_parser import parse_history

__all__ = [
    "EastmoneyClient",
    "EastmoneyFundAdapter",
    "cache_buster",
    "parse_catalog",
    "parse_history",
    "EastmoneyAPIError",
    "FetchError",
    "MalformedPayloadError",
    "ApiDomainError",
    "EmptyFundCodeError",
]
