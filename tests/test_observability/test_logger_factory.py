"""
Tests for the layer-specific logger factories.

Every logger must carry its layer and component so a fund failure can be
traced back to the stage that produced it.
"""

import pytest
from structlog.testing import capture_logs

from fund_crawler.infrastructure.observability import (
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    get_pipeline_logger,
    get_processing_logger,
    get_storage_logger,
)


def emit(logger):
    with capture_logs() as logs:
        logger.info("test_event", test_value="capture")
    [entry] = logs
    return entry


class TestGetLogger:
    def test_plain_logger_has_no_bound_context(self):
        entry = emit(get_logger())

        assert entry == {
            "event": "test_event",
            "test_value": "capture",
            "log_level": "info",
        }

    def test_binds_name_layer_component_and_extra_context(self):
        entry = emit(get_logger("mod", layer="storage", component="sink", database="fund"))

        assert entry["module"] == "mod"
        assert entry["layer"] == "storage"
        assert entry["component"] == "sink"
        assert entry["database"] == "fund"


class TestLayerFactories:
    @pytest.mark.parametrize(
        "factory,layer,component",
        [
            (get_infrastructure_logger, "infrastructure", "startup"),
            (get_ingestion_logger, "ingestion", "eastmoney-client"),
            (get_processing_logger, "processing", "point-builder"),
            (get_storage_logger, "storage", "influx-sink"),
            (get_pipeline_logger, "pipeline", "fund-pipeline"),
        ],
    )
    def test_layer_and_component_are_bound(self, factory, layer, component):
        entry = emit(factory(component))

        assert entry["layer"] == layer
        assert entry["component"] == component
        assert entry["module"] == layer

    def test_ingestion_source_is_optional(self):
        assert emit(get_ingestion_logger("c", source="eastmoney"))["source"] == "eastmoney"
        assert "source" not in emit(get_ingestion_logger("c"))

    def test_pipeline_logger_default_component(self):
        assert emit(get_pipeline_logger())["component"] == "fund-pipeline"

    def test_bound_loggers_are_isolated(self):
        first = get_storage_logger("influx-sink", database="a")
        second = get_storage_logger("influx-sink", database="b")

        assert emit(first)["database"] == "a"
        assert emit(second)["database"] == "b"
