from __future__ import annotations


class SiteCountsError(Exception):
    """Base error for the site counts block."""


class CatalogUnavailable(SiteCountsError):
    """
    The content catalog could not answer a query.
    Fatal for the current operation: callers never get a partial result.
    """


class CacheUnavailable(SiteCountsError):
    """
    The cache backend failed on read or write.
    Recovered locally: a failed read is a miss, a failed write is only logged.
    """
