"""
Fund NAV crawler.
Discovers the Eastmoney fund catalog and sinks each fund's NAV history into InfluxDB.

Modules:
- ingestion: Catalog and history retrieval from Eastmoney
- transformation: History records to measurement points
- storage: InfluxDB line protocol and batch writes
- orchestration: Cycle driver and run context
- shared: Domain models
- infrastructure: Config, logging
"""

__version__ = "0.1.0"
