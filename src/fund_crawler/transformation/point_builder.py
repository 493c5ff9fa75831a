"""
History record to measurement point normalization.

Each HistoryPoint becomes one MeasurementPoint:
- timestamp: FSRQ parsed leniently and localized to the process timezone
- fields: NAVTYPE/SGZT/SHZT pass through as strings; DWJZ/LJJZ/JZZZL are
  added only when they parse as finite floats
- tags: the fund's five identity tags

Numeric omission is a contract: the API sends "" or placeholders for
missing values and those must never drop the point. A bad date, on the
other hand, fails the whole fund's batch.
"""

import math
from datetime import datetime

from dateutil import parser as date_parser
from dateutil import tz

from fund_crawler.infrastructure.observability import get_processing_logger
from fund_crawler.shared.exceptions import FundCrawlerError
from fund_crawler.shared.models.funds import (
    FundInstrument,
    HistoryPoint,
    HistoryResponse,
)
from fund_crawler.storage.schemas.time_series import FieldValue, MeasurementPoint

DEFAULT_MEASUREMENT = "fund"

# Field key -> HistoryPoint attribute
STRING_FIELDS = {
    "NAVTYPE": "nav_type",
    "SGZT": "subscription_status",
    "SHZT": "redemption_status",
}
NUMERIC_FIELDS = {
    "DWJZ": "unit_nav",
    "LJJZ": "cumulative_nav",
    "JZZZL": "growth_rate",
}


class DateParseError(FundCrawlerError):
    """A record's date could not be parsed; the fund's batch is abandoned."""

    def __init__(self, index: int, raw_value: str, reason: str = ""):
        super().__init__(
            f"unparseable date at record {index}: {raw_value!r}"
            + (f" ({reason})" if reason else "")
        )
        self.index = index
        self.raw_value = raw_value


def parse_float(raw: str) -> float | None:
    """
    Parse a base-10 float, returning None instead of raising.

    Surrounding whitespace, digit separators and non-finite values are rejected.
    """
    if not raw or raw != raw.strip() or "_" in raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_local_datetime(raw: str) -> datetime:
    """
    Parse a human date/time string, resolving naive values to local time.

    Raises:
        ValueError, OverflowError: If the string holds no usable date
    """
    parsed = date_parser.parse(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.tzlocal())
    return parsed


class FundPointBuilder:
    """Builds the measurement points for one fund's history page."""

    def __init__(self, measurement: str = DEFAULT_MEASUREMENT):
        self.measurement = measurement
        self.log = get_processing_logger("point-builder", measurement=measurement)

    def build_point(
        self, record: HistoryPoint, tags: dict[str, str], index: int = 0
    ) -> MeasurementPoint:
        """
        Convert one record into a point.

        Raises:
            DateParseError: If the record's date does not parse
        """
        try:
            timestamp = parse_local_datetime(record.date)
        except (ValueError, OverflowError) as e:
            raise DateParseError(index, record.date, str(e)) from e

        fields: dict[str, FieldValue] = {
            key: getattr(record, attr) for key, attr in STRING_FIELDS.items()
        }
        for key, attr in NUMERIC_FIELDS.items():
            value = parse_float(getattr(record, attr))
            if value is not None:
                fields[key] = value

        return MeasurementPoint(
            measurement=self.measurement,
            tags=tags,
            fields=fields,
            timestamp=timestamp,
        )

    def build(
        self, fund: FundInstrument, history: HistoryResponse
    ) -> list[MeasurementPoint]:
        """
        Convert every record of the page, in order.

        All-or-nothing: the first bad date raises and no points are returned.

        Raises:
            DateParseError: If any record's date does not parse
        """
        tags = fund.tags()
        points = [
            self.build_point(record, tags, index)
            for index, record in enumerate(history.records)
        ]
        self.log.debug("points_built", code=fund.code, points=len(points))
        return points
