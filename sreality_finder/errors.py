"""
Error types raised across the search pipeline and its collaborators.
"""


class FinderError(Exception):
    """Base class for all Sreality Finder errors."""


class ConfigurationError(FinderError):
    """A required credential or endpoint is not configured."""


class UpstreamError(FinderError):
    """An external service (Apify, scoring endpoint) failed or returned a bad status."""


class ScrapeTimeoutError(FinderError, TimeoutError):
    """The scrape run did not finish within the polling budget."""


class ScoreParseError(FinderError):
    """The scoring model returned content that does not match the expected JSON."""


class StorageError(FinderError):
    """Reading from or writing to the search store failed."""
