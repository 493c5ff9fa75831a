"""
Observability for the crawler: structlog-based structured logging with
layer-specific logger factories. The log stream is the only operator-visible
failure signal, so every per-fund failure is logged with the fund identity.
"""

from .logging import (
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    get_pipeline_logger,
    get_processing_logger,
    get_storage_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_processing_logger",
    "get_storage_logger",
    "get_pipeline_logger",
]
