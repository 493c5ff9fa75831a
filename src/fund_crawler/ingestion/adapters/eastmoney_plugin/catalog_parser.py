"""
Eastmoney fund catalog parser.

The catalog endpoint serves a script assignment rather than JSON:

    var r = [["000001","HXCZHH","华夏成长混合","混合型-灵活","HUAXIACHENGZHANGHUNHE"],...];

Each bracketed 5-tuple becomes one FundInstrument. Discovery is
best-effort: a tuple that does not split into exactly five fields is
skipped with a warning instead of failing the whole catalog.
"""

import logging

from fund_crawler.shared.models.funds import FundInstrument

from .exceptions import MalformedPayloadError

logger = logging.getLogger(__name__)

TUPLE_SEPARATOR = "],"
FIELD_SEPARATOR = '","'
FIELD_TRIM_CHARS = '"[]'
CATALOG_FIELDS = 5


def parse_catalog(body: str) -> list[FundInstrument]:
    """
    Parse the catalog script into fund instruments.

    Args:
        body: Raw catalog response body

    Returns:
        Instruments in source order

    Raises:
        MalformedPayloadError: If the body is not an assignment of an array
    """
    eq = body.find("=")
    if eq == -1:
        raise MalformedPayloadError("catalog body has no assignment")

    payload = body[eq + 1 :].strip()
    if not payload.startswith("["):
        raise MalformedPayloadError(
            f"catalog assignment is not an array: {payload[:40]!r}"
        )

    # Drop the outer "[" and the closing "]];" tail
    payload = payload[1:-3]
    if not payload:
        return []

    funds: list[FundInstrument] = []
    for raw in payload.split(TUPLE_SEPARATOR):
        segs = raw.split(FIELD_SEPARATOR)
        if len(segs) != CATALOG_FIELDS:
            logger.warning(f"invalid node: {raw}")
            continue

        code, abridge, name, fund_type, pinyin = (
            seg.strip(FIELD_TRIM_CHARS) for seg in segs
        )
        funds.append(
            FundInstrument(
                code=code,
                abridge=abridge,
                name=name,
                type=fund_type,
                pinyin=pinyin,
            )
        )

    logger.debug(f"Parsed {len(funds)} funds from catalog")
    return funds
