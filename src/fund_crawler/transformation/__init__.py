"""
Transformation layer: normalizes raw history records into measurement points.
"""

from fund_crawler.transformation.point_builder import (
    DateParseError,
    FundPointBuilder,
    parse_float,
    parse_local_datetime,
)

__all__ = [
    "DateParseError",
    "FundPointBuilder",
    "parse_float",
    "parse_local_datetime",
]
