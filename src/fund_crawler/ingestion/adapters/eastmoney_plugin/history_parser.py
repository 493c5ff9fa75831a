"""
Eastmoney history response parser.

The history API answers JSONP: a callback name, then the JSON envelope,
then whatever closes the call. Only the first JSON value starting at the
first "{" is decoded; anything after it is ignored.
"""

import json
import logging

from pydantic import ValidationError

from fund_crawler.shared.models.funds import HistoryResponse

from .exceptions import MalformedPayloadError

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def parse_history(body: str) -> HistoryResponse:
    """
    Decode a callback-wrapped history body into its envelope.

    ErrCode is not judged here; see EastmoneyFundAdapter.fetch_history.

    Args:
        body: Raw history response body

    Returns:
        The populated HistoryResponse

    Raises:
        MalformedPayloadError: If no JSON object is present, the JSON is
            structurally invalid, or its shape is not a history envelope
    """
    beg = body.find("{")
    if beg == -1:
        raise MalformedPayloadError("invalid response body")

    try:
        raw, end = _decoder.raw_decode(body, beg)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"invalid history json: {e}") from e

    if end < len(body):
        logger.debug(f"Ignoring {len(body) - end} trailing characters after JSON")

    try:
        return HistoryResponse.model_validate(raw)
    except ValidationError as e:
        raise MalformedPayloadError(f"unexpected history shape: {e}") from e
