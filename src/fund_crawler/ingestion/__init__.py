"""
Ingestion layer: retrieves the fund catalog and per-fund NAV history from
Eastmoney, with bounded retry at the transport level and tolerant parsing
of the site's script and callback-wrapped payloads.
"""
