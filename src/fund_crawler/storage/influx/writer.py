"""InfluxDB sink for fund NAV points.

Writes one batch per fund through the InfluxDB 1.x HTTP API:

    POST {url}/write?db=<database>&precision=ns[&rp=<retention_policy>]
    body: line protocol, one point per line

The sink performs at most one write per batch and never retries; isolating
a failed fund from the rest of the cycle is the pipeline's job.
"""

from collections.abc import Sequence

from fund_crawler.config.state import InfluxDBConfig
from fund_crawler.infrastructure.observability import get_storage_logger
from fund_crawler.ingestion.ports.http import IHttpClient
from fund_crawler.shared.models.funds import FundInstrument
from fund_crawler.storage.influx.exceptions import SinkWriteError
from fund_crawler.storage.influx.line_protocol import encode_batch
from fund_crawler.storage.schemas.time_series import BatchPoints, MeasurementPoint


class InfluxSink:
    """Batched writer for one InfluxDB database.

    Handles persistence of measurement points; the HTTP client is injected
    so a single long-lived session serves the whole run.
    """

    def __init__(self, http_client: IHttpClient, config: InfluxDBConfig):
        """Initialize sink.

        Args:
            http_client: HTTP client bound to the InfluxDB server
            config: Server URL, database and write precision
        """
        self.http_client = http_client
        self.config = config
        self.log = get_storage_logger("influx-sink", database=config.database)

    @property
    def write_url(self) -> str:
        return f"{self.config.url}/write"

    def new_batch(self) -> BatchPoints:
        return BatchPoints(
            database=self.config.database,
            precision=self.config.precision,
            retention_policy=self.config.retention_policy,
        )

    async def write(self, batch: BatchPoints) -> int:
        """Write a batch in a single request.

        Returns:
            Number of points written

        Raises:
            SinkWriteError: If InfluxDB rejects the write
            aiohttp.ClientError, asyncio.TimeoutError: On transport errors
        """
        # An empty body carries no points for InfluxDB to store, so a fund
        # whose history page has no records costs no request
        if not batch.points:
            self.log.debug("batch_empty_skipped")
            return 0

        params = {"db": batch.database, "precision": batch.precision}
        if batch.retention_policy:
            params["rp"] = batch.retention_policy

        response = await self.http_client.post(
            self.write_url,
            data=encode_batch(batch).encode("utf-8"),
            params=params,
            headers={"Content-Type": "text/plain; charset=utf-8"},
            timeout=self.config.timeout,
        )
        if not 200 <= response.status_code < 300:
            raise SinkWriteError(
                f"influxdb write error, code=[{response.status_code}], "
                f"body=[{response.body.strip()}]",
                status_code=response.status_code,
                body=response.body,
            )
        return len(batch)

    async def write_points(
        self, fund: FundInstrument, points: Sequence[MeasurementPoint]
    ) -> int:
        """Write every point of one fund as one batch.

        Returns:
            Number of points written
        """
        batch = self.new_batch()
        for point in points:
            batch.add_point(point)

        written = await self.write(batch)
        self.log.debug("sink_succeeded", code=fund.code, name=fund.name, count=written)
        return written
