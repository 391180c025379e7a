# site_harvest/crawler/models.py
"""
Data models for the SiteHarvest crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ResourceKind(str, Enum):
    """What a fetch is for: pages are parsed, images are stored as raw bytes."""

    PAGE = "page"
    IMAGE = "image"


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class FetchedResource:
    """Raw payload of one successful GET."""

    url: str
    content: bytes
    content_type: str = ""

    @property
    def mime(self) -> str:
        return self.content_type.split(";", 1)[0].strip().lower()

    @property
    def charset(self) -> Optional[str]:
        for part in self.content_type.split(";")[1:]:
            key, _, value = part.partition("=")
            if key.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"')
        return None


@dataclass(slots=True, frozen=True)
class ExtractedPage:
    """Plain result of parsing one HTML document."""

    text: str
    image_urls: Tuple[str, ...] = ()
    link_urls: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ImageRecord:
    source_url: str
    content_ref: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.source_url, "filename": self.content_ref}


@dataclass(slots=True, frozen=True)
class PageRecord:
    """One crawled page: its text blob and the images it owns."""

    url: str
    content_ref: str
    images: Tuple[ImageRecord, ...] = ()
    record_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "text_file": self.content_ref,
            "images": [img.to_dict() for img in self.images],
        }


@dataclass(slots=True)
class CrawlSummary:
    """Terminal output of one crawl run."""

    pages: List[PageRecord] = field(default_factory=list)
    failed_urls: List[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def pages_visited(self) -> int:
        return len(self.pages)

    def to_response(self) -> Dict[str, Any]:
        """Shape returned across the invocation boundary."""
        return {
            "scraped_pages": self.pages_visited,
            "data": [page.to_dict() for page in self.pages],
        }
