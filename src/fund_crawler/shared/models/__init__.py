"""Shared domain models."""

from fund_crawler.shared.models.funds import (
    FundInstrument,
    HistoryDetails,
    HistoryPoint,
    HistoryResponse,
)

__all__ = [
    "FundInstrument",
    "HistoryDetails",
    "HistoryPoint",
    "HistoryResponse",
]
