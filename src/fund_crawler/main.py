"""
Process entrypoint.

Composition root: loads settings, configures logging, builds the two
long-lived HTTP clients (Eastmoney, InfluxDB) once, wires them into the
pipeline and runs it until SIGINT/SIGTERM cancels the run context.
"""

import asyncio
import signal
from dataclasses import dataclass

import aiohttp

from fund_crawler.config.settings import load_settings
from fund_crawler.config.state import ConfigState
from fund_crawler.infrastructure.observability import (
    get_infrastructure_logger,
    setup_logging,
)
from fund_crawler.ingestion.adapters.eastmoney_plugin import (
    EastmoneyClient,
    EastmoneyFundAdapter,
)
from fund_crawler.ingestion.config.value_objects import (
    EastmoneyClientConfig,
    HttpClientConfig,
)
from fund_crawler.ingestion.connectors.aiohttp_client import AiohttpClient
from fund_crawler.orchestration import FundCrawlPipeline, RunContext
from fund_crawler.storage.influx.writer import InfluxSink
from fund_crawler.transformation.point_builder import FundPointBuilder


@dataclass
class Application:
    """Everything built at startup and held for the process lifetime."""

    pipeline: FundCrawlPipeline
    source_http: AiohttpClient
    sink_http: AiohttpClient

    async def close(self) -> None:
        await self.source_http.close()
        await self.sink_http.close()


def build_application(settings: ConfigState) -> Application:
    """Wire every component from the configuration state."""
    eastmoney_config = EastmoneyClientConfig.from_state(settings.eastmoney)
    source_http = AiohttpClient(eastmoney_config.http_config)

    influx = settings.influxdb
    headers = (
        {
            "Authorization": aiohttp.encode_basic_auth(
                influx.username, influx.password or ""
            )
        }
        if influx.username
        else {}
    )
    sink_http = AiohttpClient(HttpClientConfig(timeout=influx.timeout), headers=headers)

    adapter = EastmoneyFundAdapter(
        EastmoneyClient(eastmoney_config, source_http), eastmoney_config
    )
    pipeline = FundCrawlPipeline(
        adapter=adapter,
        point_builder=FundPointBuilder(measurement=influx.measurement),
        sink=InfluxSink(sink_http, influx),
        config=settings.pipeline,
    )
    return Application(pipeline=pipeline, source_http=source_http, sink_http=sink_http)


def _install_signal_handlers(ctx: RunContext) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, ctx.cancel)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            pass


async def run(settings: ConfigState, ctx: RunContext | None = None) -> None:
    """Run the crawler until the context is cancelled."""
    log = get_infrastructure_logger("startup")
    ctx = ctx or RunContext()
    _install_signal_handlers(ctx)

    app = build_application(settings)
    log.info(
        "init_successfully",
        env=settings.env,
        influxdb=settings.influxdb.url,
        database=settings.influxdb.database,
    )
    try:
        await app.pipeline.run_forever(ctx)
    finally:
        await app.close()


def main() -> None:
    settings = load_settings()
    setup_logging(
        level=settings.logging.level,
        json_logs=settings.logging.json_logs,
    )
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
