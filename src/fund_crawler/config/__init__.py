"""Configuration state and loading."""

from fund_crawler.config.settings import load_settings
from fund_crawler.config.state import (
    ConfigLoader,
    ConfigState,
    EastmoneyConfig,
    InfluxDBConfig,
    LoggingConfig,
    PipelineConfig,
    get_config,
)

__all__ = [
    "ConfigLoader",
    "ConfigState",
    "EastmoneyConfig",
    "InfluxDBConfig",
    "LoggingConfig",
    "PipelineConfig",
    "get_config",
    "load_settings",
]
