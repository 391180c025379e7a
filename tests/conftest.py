# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Tuple, Union

import pytest
from aiohttp import web

from site_harvest.config import HarvestConfig
from site_harvest.crawler.models import FetchedResource, ResourceKind
from site_harvest.errors import FetchError
from site_harvest.storage.content_store import ContentStore
from site_harvest.storage.records import InMemoryRecordStore

#: smallest valid PNG signature + IHDR start; enough for extension sniffing
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 16
GIF_BYTES = b"GIF89a" + b"\x01\x00\x01\x00" + b"\x00" * 8


def html_page(body: str, title: str = "page") -> bytes:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>".encode()


class FakeFetcher:
    """In-memory stand-in for Fetcher.

    ``site`` maps URL -> bytes, a FetchError to raise, or an asyncio.Event to
    block on before answering with an empty page.
    """

    def __init__(self, site: Dict[str, Union[bytes, FetchError, asyncio.Event]]) -> None:
        self.site = site
        self.calls: List[Tuple[str, ResourceKind]] = []

    def page_calls(self) -> List[str]:
        return [url for url, kind in self.calls if kind is ResourceKind.PAGE]

    def image_calls(self) -> List[str]:
        return [url for url, kind in self.calls if kind is ResourceKind.IMAGE]

    async def fetch(self, url: str, kind: ResourceKind = ResourceKind.PAGE) -> FetchedResource:
        self.calls.append((url, kind))
        await asyncio.sleep(0)
        entry = self.site.get(url)
        if entry is None:
            raise FetchError(url, "HTTP 404", status=404)
        if isinstance(entry, FetchError):
            raise entry
        if isinstance(entry, asyncio.Event):
            await entry.wait()
            entry = html_page("")
        ctype = "text/html; charset=utf-8" if kind is ResourceKind.PAGE else "image/png"
        return FetchedResource(url=url, content=entry, content_type=ctype)


@pytest.fixture()
def harvest_config(tmp_path) -> HarvestConfig:
    """Config writing into a temporary storage directory, no retries."""
    return HarvestConfig(
        timeout=2.0,
        storage_dir=tmp_path / "blobs",
        user_agent="TestAgent/1.0",
    )


@pytest.fixture()
def content_store(harvest_config) -> ContentStore:
    return ContentStore(harvest_config.storage_dir)


@pytest.fixture()
def records() -> InMemoryRecordStore:
    return InMemoryRecordStore()


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def html_response(body: str, status: int = 200) -> web.Response:
    return web.Response(text=f"<html><body>{body}</body></html>", content_type="text/html", status=status)


def image_response(data: bytes = PNG_BYTES, content_type: Optional[str] = "image/png") -> web.Response:
    return web.Response(body=data, content_type=content_type)
