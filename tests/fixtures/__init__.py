"""
Test fixtures package for crawler tests.

Provides canned Eastmoney payloads, an IHttpClient test double, and
helpers for building history records.
"""

import json
from typing import Any

from fund_crawler.ingestion.ports.http import HttpResponse
from fund_crawler.shared.models.funds import FundInstrument, HistoryResponse

CATALOG_BODY = 'var r = [["001","A","Alpha","T1","a"],["002","B","Beta","T2","b"]];'

HISTORY_BODY = (
    'jQuery123({"ErrCode":0,"ErrMsg":"","TotalCount":1,"Data":{"LSJZList":'
    '[{"FSRQ":"2024-01-02","DWJZ":"1.234","LJJZ":"2.345","JZZZL":"0.12"}]}})'
)


class FakeHttpClient:
    """IHttpClient double that replays scripted responses and records calls.

    Each scripted item is an HttpResponse to return or an exception to raise.
    The last item repeats once the script runs out.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.get_calls: list[dict] = []
        self.post_calls: list[dict] = []
        self.closed = False

    def _next(self):
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        return item

    async def get(self, url, params=None, headers=None, timeout=None):
        self.get_calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        return self._next()

    async def post(self, url, data=None, params=None, headers=None, timeout=None):
        self.post_calls.append(
            {
                "url": url,
                "data": data,
                "params": params,
                "headers": headers,
                "timeout": timeout,
            }
        )
        return self._next()

    async def close(self):
        self.closed = True


def http_response(body: str = "", status: int = 200) -> HttpResponse:
    """Build an HttpResponse with a text body."""
    return HttpResponse(status_code=status, body=body)


def create_history_record(
    date: str = "2024-01-02",
    unit_nav: str = "1.234",
    cumulative_nav: str = "2.345",
    growth_rate: str = "0.12",
    **extra: str,
) -> dict[str, Any]:
    """Create a single raw LSJZList entry."""
    record = {
        "FSRQ": date,
        "DWJZ": unit_nav,
        "LJJZ": cumulative_nav,
        "JZZZL": growth_rate,
        "NAVTYPE": "1",
        "SGZT": "开放申购",
        "SHZT": "开放赎回",
    }
    record.update(extra)
    return record


def create_history_body(
    records: list[dict[str, Any]],
    err_code: int = 0,
    err_msg: str = "",
    callback: str = "jQuer",
) -> str:
    """Wrap records in a callback-style history response body."""
    envelope = {
        "Data": {"LSJZList": records, "FundType": "001", "SYType": None},
        "ErrCode": err_code,
        "ErrMsg": err_msg,
        "TotalCount": len(records),
        "Expansion": None,
        "PageSize": 20,
        "PageIndex": 1,
    }
    return f"{callback}({json.dumps(envelope, ensure_ascii=False)})"


def create_history(records: list[dict[str, Any]]) -> HistoryResponse:
    """Build a parsed HistoryResponse from raw records."""
    return HistoryResponse.model_validate({"ErrCode": 0, "Data": {"LSJZList": records}})


def create_fund(code: str = "000001", **overrides: str) -> FundInstrument:
    """Create a catalog entry."""
    values = {
        "code": code,
        "abridge": "HXCZHH",
        "name": "华夏成长混合",
        "type": "混合型-灵活",
        "pinyin": "HUAXIACHENGZHANGHUNHE",
    }
    values.update(overrides)
    return FundInstrument(**values)


__all__ = [
    "CATALOG_BODY",
    "HISTORY_BODY",
    "FakeHttpClient",
    "http_response",
    "create_history_record",
    "create_history_body",
    "create_history",
    "create_fund",
]
