"""
Orchestration layer: the cancellable run context and the crawl driver.
"""

from fund_crawler.orchestration.context import RunContext
from fund_crawler.orchestration.pipeline import (
    CycleResult,
    CycleStatus,
    FundCrawlPipeline,
)

__all__ = ["CycleResult", "CycleStatus", "FundCrawlPipeline", "RunContext"]
