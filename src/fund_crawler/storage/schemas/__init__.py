"""Storage schemas."""

from fund_crawler.storage.schemas.time_series import (
    BatchPoints,
    FieldValue,
    MeasurementPoint,
)

__all__ = ["BatchPoints", "FieldValue", "MeasurementPoint"]
