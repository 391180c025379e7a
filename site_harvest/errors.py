# File: site_harvest/errors.py
"""site_harvest.errors: типизированные ошибки краулера.

Page- and image-level failures (:class:`FetchError`) are absorbed by the
orchestrator; :class:`InvalidInput` and :class:`StoreError` abort the whole
invocation.
"""
from __future__ import annotations

from typing import Optional

__all__ = ["HarvestError", "InvalidInput", "ConfigError", "FetchError", "StoreError"]


class HarvestError(Exception):
    """Base class for every error raised by SiteHarvest."""


class InvalidInput(HarvestError, ValueError):
    """Malformed seed URL or out-of-range page budget."""


class ConfigError(HarvestError, ValueError):
    """Configuration file could not be read or parsed."""


class FetchError(HarvestError):
    """A single page or image could not be retrieved."""

    def __init__(
        self,
        url: str,
        reason: str,
        *,
        status: Optional[int] = None,
        transient: bool = False,
    ) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status
        self.transient = transient


class StoreError(HarvestError):
    """Backing storage is not writable."""
