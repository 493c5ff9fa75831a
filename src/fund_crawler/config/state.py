"""
Crawler configuration: one validated ConfigState built from layered sources.

Precedence, lowest first:
    built-in defaults (the production Eastmoney endpoints, local InfluxDB)
    <config_dir>/{eastmoney,influxdb,pipeline,logging}.yaml
    <config_dir>/env/<FUND_CRAWLER_ENV>.yaml
    environment variables (INFLUX_*, FUND_CRAWLER_INTERVAL, LOG_*)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


DEFAULT_REFERER = "http://fund.eastmoney.com/f10/jjjz_519961.html"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/74.0.3729.169 Safari/537.36"
)

# Write precisions accepted by the InfluxDB 1.x /write endpoint
INFLUX_PRECISIONS = ("ns", "n", "u", "ms", "s", "m", "h")


# =============================================================================
# SECTIONS
# =============================================================================


class EastmoneyConfig(BaseModel):
    """Eastmoney catalog and history API configuration."""

    model_config = ConfigDict(extra="allow")

    catalog_url: str = Field(default="http://fund.eastmoney.com/js/fundcode_search.js")
    history_url: str = Field(default="http://api.fund.eastmoney.com/f10/lsjz")
    referer: str = Field(default=DEFAULT_REFERER)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    callback: str = Field(default="jQuer")
    page_index: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=1000)
    timeout: float = Field(default=30.0, gt=0)
    max_attempts: int = Field(default=3, ge=1, le=50)


class InfluxDBConfig(BaseModel):
    """InfluxDB 1.x HTTP write configuration."""

    model_config = ConfigDict(extra="allow")

    url: str = Field(default="http://localhost:8086")
    database: str = Field(default="fund", min_length=1)
    measurement: str = Field(default="fund", min_length=1)
    precision: str = Field(default="ns")
    retention_policy: str | None = Field(default=None)
    username: str | None = Field(default=None)
    password: str | None = Field(default=None)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("InfluxDB URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("precision")
    @classmethod
    def validate_precision(cls, v: str) -> str:
        if v not in INFLUX_PRECISIONS:
            raise ValueError(
                f"precision must be one of {', '.join(INFLUX_PRECISIONS)}, got {v!r}"
            )
        return v


class PipelineConfig(BaseModel):
    """Pacing of the crawl loop, in seconds."""

    model_config = ConfigDict(extra="allow")

    instrument_interval: float = Field(default=1.0, ge=0)
    cycle_delay: float = Field(default=0.0, ge=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)


class ConfigState(BaseModel):
    """Everything the crawler needs to start, validated once at startup."""

    model_config = ConfigDict(extra="allow")

    eastmoney: EastmoneyConfig = Field(default_factory=EastmoneyConfig)
    influxdb: InfluxDBConfig = Field(default_factory=InfluxDBConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")


# =============================================================================
# LOADER
# =============================================================================


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# (environment variable, section, key, converter)
ENV_OVERRIDES: tuple[tuple[str, str, str, Any], ...] = (
    ("INFLUX_URL", "influxdb", "url", str),
    ("INFLUX_DATABASE", "influxdb", "database", str),
    ("INFLUX_USERNAME", "influxdb", "username", str),
    ("INFLUX_PASSWORD", "influxdb", "password", str),
    ("FUND_CRAWLER_INTERVAL", "pipeline", "instrument_interval", float),
    ("LOG_LEVEL", "logging", "level", str),
    ("LOG_JSON", "logging", "json_logs", _as_bool),
)


class ConfigLoader:
    """
    Build a ConfigState from a config directory and the process environment.

    A missing file is not an error; an unreadable one is logged and skipped.
    Each section file may either nest its values under the section name
    (`influxdb: {url: ...}`) or hold them at top level.
    """

    SECTION_FILES = (
        "eastmoney.yaml",
        "influxdb.yaml",
        "pipeline.yaml",
        "logging.yaml",
    )

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self.env = os.getenv("FUND_CRAWLER_ENV", "dev")
        self._cache: dict[Path, dict[str, Any]] = {}

    def _read(self, path: Path) -> dict[str, Any]:
        if path in self._cache:
            return self._cache[path]
        if not path.is_file():
            logger.debug(f"No config file at {path}, skipping")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Unreadable config file {path}: {e}")
            return {}

        self._cache[path] = data
        return data

    def _section(self, filename: str) -> dict[str, Any]:
        name = filename.removesuffix(".yaml")
        data = self._read(self.config_dir / filename)
        nested = data.get(name)
        return {name: nested if isinstance(nested, dict) else data}

    def _env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for var, section, key, convert in ENV_OVERRIDES:
            raw = os.getenv(var)
            if raw:
                overrides.setdefault(section, {})[key] = convert(raw)
        return overrides

    @classmethod
    def _merge(cls, base: dict, override: dict) -> dict:
        """Recursive dict merge; `override` wins on conflicts."""
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = cls._merge(current, value)
            else:
                merged[key] = value
        return merged

    def load(self) -> ConfigState:
        """
        Raises:
            ValidationError: If the merged values do not validate
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        merged: dict[str, Any] = {}
        for filename in self.SECTION_FILES:
            merged = self._merge(merged, self._section(filename))
        env_file = self.config_dir / "env" / f"{self.env}.yaml"
        merged = self._merge(merged, self._read(env_file))
        merged = self._merge(merged, self._env_overrides())

        try:
            state = ConfigState(env=self.env, config_dir=str(self.config_dir), **merged)
        except Exception as e:
            logger.error(f"Invalid configuration: {e}")
            raise

        logger.info(
            f"Configuration ready: influxdb={state.influxdb.url}/"
            f"{state.influxdb.database}, "
            f"interval={state.pipeline.instrument_interval}s"
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load the configuration.

    Args:
        config_dir: Defaults to $FUND_CRAWLER_CONFIG_DIR, then ./config
    """
    if config_dir is None:
        config_dir = os.getenv("FUND_CRAWLER_CONFIG_DIR", "./config")
        if not Path(config_dir).is_dir():
            logger.warning(f"No config directory at {config_dir}, using defaults")

    return ConfigLoader(config_dir=config_dir).load()


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "EastmoneyConfig",
    "InfluxDBConfig",
    "LoggingConfig",
    "PipelineConfig",
    "get_config",
]
