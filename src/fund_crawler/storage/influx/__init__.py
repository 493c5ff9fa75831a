"""InfluxDB line protocol encoding and batched sink."""

from fund_crawler.storage.influx.exceptions import SinkWriteError
from fund_crawler.storage.influx.line_protocol import encode_batch, encode_point
from fund_crawler.storage.influx.writer import InfluxSink

__all__ = ["InfluxSink", "SinkWriteError", "encode_batch", "encode_point"]
