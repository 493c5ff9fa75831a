"""
Fund Crawl Pipeline
===================

Drives the crawl: discover the catalog, then for each fund fetch its
history, build points and write them, pausing between funds.

States per cycle:
    DiscoverCatalog -> (per fund) FetchHistory -> ParseHistory ->
    CheckDomainError -> BuildPoints -> Write -> Sleep -> next fund

- A discovery failure aborts the cycle; run_forever logs it and starts
  a new one.
- Any per-fund failure is logged with the fund's identity and the cycle
  moves on.
- The pause between funds applies after successes and failures alike.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fund_crawler.config.state import PipelineConfig
from fund_crawler.infrastructure.observability import get_pipeline_logger
from fund_crawler.ingestion.adapters.eastmoney_plugin import (
    ApiDomainError,
    EastmoneyFundAdapter,
)
from fund_crawler.orchestration.context import RunContext
from fund_crawler.shared.models.funds import FundInstrument
from fund_crawler.storage.influx.writer import InfluxSink
from fund_crawler.transformation.point_builder import FundPointBuilder


class CycleStatus(str, Enum):
    """Cycle execution status."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class CycleResult:
    """Result of one pass over the catalog."""

    status: CycleStatus
    duration_seconds: float = 0.0
    funds_total: int = 0
    funds_succeeded: int = 0
    funds_failed: int = 0
    points_written: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "status": self.status.value,
            "duration_seconds": round(self.duration_seconds, 3),
            "funds_total": self.funds_total,
            "funds_succeeded": self.funds_succeeded,
            "funds_failed": self.funds_failed,
            "points_written": self.points_written,
        }


class FundCrawlPipeline:
    """
    Sequential catalog -> history -> points -> sink driver.

    Responsibilities:
    - Order the per-fund steps and isolate their failures
    - Pace requests against the remote API
    - NOT responsible for: fetching, parsing, normalizing, writing
      (delegated to injected dependencies)
    """

    def __init__(
        self,
        adapter: EastmoneyFundAdapter,
        point_builder: FundPointBuilder,
        sink: InfluxSink,
        config: PipelineConfig | None = None,
    ):
        """
        Initialize pipeline with injected dependencies.

        Args:
            adapter: Catalog discovery and history retrieval
            point_builder: History to measurement points
            sink: Batched InfluxDB writer
            config: Pacing (interval between funds, delay between cycles)
        """
        self.adapter = adapter
        self.point_builder = point_builder
        self.sink = sink
        self.config = config or PipelineConfig()
        self.log = get_pipeline_logger()

    async def process_instrument(self, fund: FundInstrument) -> int:
        """
        Fetch, normalize and write one fund.

        Returns:
            Number of points written

        Raises:
            Any per-fund error (fetch, payload, domain, date, sink)
        """
        history = await self.adapter.fetch_history(fund)
        points = self.point_builder.build(fund, history)
        return await self.sink.write_points(fund, points)

    def _log_fund_failure(self, fund: FundInstrument, error: Exception) -> None:
        context: dict[str, Any] = {
            "code": fund.code,
            "name": fund.name,
            "error_type": type(error).__name__,
            "error": str(error),
        }
        if isinstance(error, ApiDomainError):
            context.update(err_code=error.err_code, err_msg=error.err_msg)
        self.log.error("fund_failed", **context)

    async def run_cycle(self, ctx: RunContext) -> CycleResult:
        """
        Run one pass over the freshly discovered catalog.

        Raises:
            Discovery errors (FetchError, MalformedPayloadError), which are
            fatal to this cycle only
        """
        start = time.monotonic()
        funds = await self.adapter.fetch_catalog()
        result = CycleResult(status=CycleStatus.SUCCESS, funds_total=len(funds))

        for fund in funds:
            if ctx.cancelled:
                result.status = CycleStatus.CANCELLED
                break

            try:
                result.points_written += await self.process_instrument(fund)
                result.funds_succeeded += 1
            except Exception as e:
                result.funds_failed += 1
                result.errors.append(f"{fund.code}: {e}")
                self._log_fund_failure(fund, e)

            if not await ctx.sleep(self.config.instrument_interval):
                result.status = CycleStatus.CANCELLED
                break

        if result.status is CycleStatus.SUCCESS and result.funds_failed:
            result.status = (
                CycleStatus.FAILED
                if result.funds_succeeded == 0
                else CycleStatus.PARTIAL
            )
        result.duration_seconds = time.monotonic() - start
        return result

    async def run_forever(self, ctx: RunContext) -> None:
        """Repeat cycles until the context is cancelled. No error ends the loop."""
        while not ctx.cancelled:
            self.log.info("cycle_started")
            try:
                result = await self.run_cycle(ctx)
            except Exception as e:
                self.log.error(
                    "cycle_failed", error_type=type(e).__name__, error=str(e)
                )
            else:
                self.log.info("cycle_completed", **result.to_dict())

            if not await ctx.sleep(self.config.cycle_delay):
                break

        self.log.info("pipeline_stopped")
