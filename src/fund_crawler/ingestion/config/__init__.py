"""Ingestion configuration value objects."""

from .value_objects import EastmoneyClientConfig, HttpClientConfig, RetryConfig  # noqa: F401

__all__ = ["EastmoneyClientConfig", "HttpClientConfig", "RetryConfig"]
