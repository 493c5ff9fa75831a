"""
Root of the crawler's exception hierarchy.

Every error the pipeline can attribute to a single fund or cycle derives
from FundCrawlerError, so the driver can tell domain failures apart from
programming errors in its logs.
"""


class FundCrawlerError(Exception):
    """Base exception for all crawler errors."""

    pass
