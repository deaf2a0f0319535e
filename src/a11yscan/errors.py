"""
Exception types shared across the scanner.
"""
from __future__ import annotations


class ScanRequestError(ValueError):
    """Scan request rejected before any crawl work (client error)."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(message)
        self.error = error
        self.message = message


class ConfigurationError(RuntimeError):
    """Server-side configuration problem, e.g. no audit API key."""


class AuditError(Exception):
    """A single accessibility audit call failed."""


class LinkFetchError(Exception):
    """A page could not be fetched for link extraction."""


class FrontierEmpty(LookupError):
    """No queued URLs remain."""
