"""
Structured logging for fund-crawler.

Every entry is an event name plus key/value context. A typical per-fund
failure rendered as JSON:

    {
        "app": "fund-crawler",
        "layer": "pipeline",
        "component": "fund-pipeline",
        "event": "fund_failed",
        "code": "000001",
        "name": "华夏成长混合",
        "error_type": "ApiDomainError",
        ...
    }

Layers follow the crawl: infrastructure (startup), ingestion (catalog and
history requests), processing (points), storage (InfluxDB) and pipeline
(cycles). The log stream is the only failure signal an operator gets.
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "fund-crawler"

Layer = Literal["infrastructure", "ingestion", "processing", "storage", "pipeline"]

_SEVERITIES = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "CRITICAL",
}


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mirror `level` as an upper-case `severity` for log collectors."""
    level = event_dict.get("level")
    if level:
        event_dict["severity"] = _SEVERITIES.get(level, "INFO")
    return event_dict


def _shared_processors(include_timestamp: bool) -> list[Processor]:
    """Chain applied to structlog entries and to plain stdlib records alike."""
    processors: list[Processor] = []
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    return processors


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        # Fund names are Chinese; keep them readable in the JSON lines
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structlog over the stdlib logging backend. Call once at startup.

    Rendering happens in a single ProcessorFormatter on the root handler, so
    structlog entries and plain `logging.getLogger` records come out in the
    same format and a traceback is rendered once, inside the entry.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO
        json_logs: One JSON object per line if True, coloured console otherwise
        include_timestamp: Prefix entries with an ISO timestamp

    Usage:
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    shared = _shared_processors(include_timestamp)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    # Replace the handler of an earlier call instead of stacking a second one
    for existing in root.handlers[:]:
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger with its layer, component and module bound.

    Args:
        name: stdlib logger name, also bound as `module`
        layer: Crawl layer the caller belongs to
        component: Component within the layer
        **initial_context: Extra key/value pairs bound to every entry
    """
    logger = structlog.get_logger(name)

    context: dict[str, Any] = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)

    return logger.bind(**context) if context else logger


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str, **context: Any
) -> structlog.stdlib.BoundLogger:
    """Logger for startup and configuration."""
    return get_logger(
        "infrastructure", layer="infrastructure", component=component, **context
    )


def get_ingestion_logger(
    component: str,
    source: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger for catalog and history retrieval.

    Usage:
        >>> log = get_ingestion_logger("eastmoney-client", source="eastmoney")
        >>> log.warning("fetch_attempt_failed", attempt=1, max_attempts=3)
    """
    if source:
        context = {"source": source, **context}
    return get_logger("ingestion", layer="ingestion", component=component, **context)


def get_processing_logger(
    component: str, **context: Any
) -> structlog.stdlib.BoundLogger:
    """Logger for history-to-point normalization."""
    return get_logger(
        "processing", layer="processing", component=component, **context
    )


def get_storage_logger(
    component: str, **context: Any
) -> structlog.stdlib.BoundLogger:
    """
    Logger for InfluxDB writes.

    Usage:
        >>> log = get_storage_logger("influx-sink", database="fund")
        >>> log.debug("sink_succeeded", code="000001", count=20)
    """
    return get_logger("storage", layer="storage", component=component, **context)


def get_pipeline_logger(
    component: str = "fund-pipeline", **context: Any
) -> structlog.stdlib.BoundLogger:
    """Logger for the cycle driver."""
    return get_logger("pipeline", layer="pipeline", component=component, **context)
