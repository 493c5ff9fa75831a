"""
Settings access for fund_crawler.

Import this module to access:
  - load_settings(): Load the ConfigState with graceful degradation
"""

import logging

from fund_crawler.config.state import ConfigState, get_config

logger = logging.getLogger(__name__)


def load_settings(config_dir: str | None = None) -> ConfigState:
    """Load configuration state, falling back to defaults on failure."""
    try:
        return get_config(config_dir)
    except Exception as e:
        logger.error(f"Failed to initialize configuration: {e}")
        logger.warning("Using minimal default configuration")
        # Defaults mirror the production endpoints, so the crawler still runs
        return ConfigState()


__all__ = ["load_settings"]
