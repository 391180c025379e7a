"""site_harvest.crawler: frontier, fetcher and extractor.

The crawl loop lives in :mod:`site_harvest.crawler.crawler`.
"""
from site_harvest.crawler.models import (
    CrawlState,
    CrawlSummary,
    ExtractedPage,
    FetchedResource,
    ImageRecord,
    PageRecord,
    ResourceKind,
)
from site_harvest.crawler.frontier import Frontier
from site_harvest.crawler.extractor import parse_html
from site_harvest.crawler.fetcher import Fetcher, RetryingFetcher

__all__ = [
    "CrawlState",
    "CrawlSummary",
    "ExtractedPage",
    "FetchedResource",
    "Fetcher",
    "Frontier",
    "ImageRecord",
    "PageRecord",
    "ResourceKind",
    "RetryingFetcher",
    "parse_html",
]
