# === FILE: site_harvest/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Tuple

from aiohttp import ClientSession

from site_harvest.config import CrawlRequest, HarvestConfig
from site_harvest.crawler.extractor import parse_html
from site_harvest.crawler.fetcher import Fetcher, ResourceFetcher, RetryingFetcher, open_session
from site_harvest.crawler.frontier import Frontier
from site_harvest.crawler.models import (
    CrawlState,
    CrawlSummary,
    FetchedResource,
    ImageRecord,
    PageRecord,
    ResourceKind,
)
from site_harvest.errors import FetchError
from site_harvest.logger import get_logger
from site_harvest.storage.content_store import ContentStore
from site_harvest.storage.records import InMemoryRecordStore, RecordStore

__all__ = ("AsyncCrawler",)

_Outcome = Tuple[Optional[PageRecord], Tuple[str, ...]]


class AsyncCrawler:
    """Breadth-first, same-domain crawler that stores page text and images.

    Usage::

        async with AsyncCrawler(config, ContentStore("blobs")) as crawler:
            summary = await crawler.crawl(CrawlRequest.build(url, 10))

    A *fetcher* can be injected (tests, custom transports); otherwise an aiohttp
    session is opened on ``__aenter__`` and closed on ``__aexit__``.
    """

    def __init__(
        self,
        config: HarvestConfig,
        store: ContentStore,
        records: Optional[RecordStore] = None,
        fetcher: Optional[ResourceFetcher] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.records: RecordStore = records if records is not None else InMemoryRecordStore()
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self.state = CrawlState.IDLE
        self.frontier: Optional[Frontier] = None
        self.logger = get_logger("crawler")
        self._cond: Optional[asyncio.Condition] = None
        self._cancel: Optional[asyncio.Event] = None

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = open_session(self.config)
            fetcher: ResourceFetcher = Fetcher(self.session, self.config)
            if self.config.retry_times > 0:
                fetcher = RetryingFetcher(fetcher, self.config.retry_times, self.config.retry_backoff)
            self.fetcher = fetcher
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    def cancel(self) -> None:
        """Stop dispatching new pages; :meth:`crawl` returns what it has so far."""
        if self._cancel is not None:
            self._cancel.set()

    async def crawl(self, request: CrawlRequest) -> CrawlSummary:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with AsyncCrawler(...)'")
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"Crawler already used (state={self.state.value})")

        self.state = CrawlState.RUNNING
        self.logger.info("Старт обхода: %s (max_pages=%d)", request.seed_url, request.max_pages)
        start = time.monotonic()

        self.frontier = Frontier(request.max_pages)
        self.frontier.reset(request.seed_url)
        self._cond = asyncio.Condition()
        self._cancel = asyncio.Event()
        summary = CrawlSummary()

        timer = None
        if self.config.crawl_timeout is not None:
            timer = asyncio.get_running_loop().call_later(self.config.crawl_timeout, self.cancel)

        workers = [
            asyncio.create_task(self._worker(summary), name=f"crawl-worker-{i}")
            for i in range(self.config.concurrency)
        ]
        cancel_wait = asyncio.create_task(self._cancel.wait())
        pool = asyncio.gather(*workers)
        try:
            done, _ = await asyncio.wait({pool, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
            if pool not in done:
                self.state = CrawlState.DRAINING
                summary.cancelled = True
                self.logger.warning("Crawl cancelled; returning %d pages collected so far", summary.pages_visited)
                for w in workers:
                    w.cancel()
                await asyncio.gather(pool, return_exceptions=True)
            else:
                # re-raises fatal errors (StoreError) from any worker
                pool.result()
        except BaseException:
            for w in workers:
                w.cancel()
            await asyncio.gather(pool, *workers, return_exceptions=True)
            raise
        finally:
            cancel_wait.cancel()
            if timer is not None:
                timer.cancel()

        if self.state is CrawlState.RUNNING:
            self.state = CrawlState.COMPLETED
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (ошибок: %d)",
            summary.pages_visited,
            duration,
            len(summary.failed_urls),
        )
        return summary

    async def _worker(self, summary: CrawlSummary) -> None:
        assert self._cond is not None and self.frontier is not None and self._cancel is not None
        while True:
            async with self._cond:
                while True:
                    if self._cancel.is_set():
                        return
                    url = self.frontier.pop()
                    if url is not None:
                        break
                    if self.frontier.done:
                        self._cond.notify_all()
                        return
                    await self._cond.wait()

            record, links = await self._process_page(url)

            async with self._cond:
                # commit: no await between persisting and offering new links
                if record is not None:
                    record = self.records.save(record)
                    summary.pages.append(record)
                else:
                    summary.failed_urls.append(url)
                self.frontier.mark_visited(url)
                accepted = sum(self.frontier.offer(link, referrer=url) for link in links)
                self.logger.debug("%s: %d new links queued", url, accepted)
                self._cond.notify_all()

    async def _process_page(self, url: str) -> _Outcome:
        assert self.fetcher is not None
        try:
            page = await self.fetcher.fetch(url, ResourceKind.PAGE)
        except FetchError as exc:
            self.logger.warning("Error scraping %s: %s", url, exc.reason)
            return None, ()

        extracted = parse_html(page.content, base_url=url, encoding=page.charset)
        content_ref = self.store.put_text(extracted.text)
        images = await self._collect_images(url, extracted.image_urls)
        self.logger.debug("Scraped %s: %d chars, %d/%d images", url, len(extracted.text), len(images), len(extracted.image_urls))
        return PageRecord(url=url, content_ref=content_ref, images=tuple(images)), extracted.link_urls

    async def _collect_images(self, page_url: str, image_urls: Tuple[str, ...]) -> List[ImageRecord]:
        if not image_urls:
            return []
        assert self.fetcher is not None
        fetcher = self.fetcher
        sem = asyncio.Semaphore(self.config.image_concurrency)

        async def _fetch_one(src: str) -> Optional[FetchedResource]:
            async with sem:
                try:
                    return await fetcher.fetch(src, ResourceKind.IMAGE)
                except FetchError as exc:
                    self.logger.warning("Error saving image %s (page %s): %s", src, page_url, exc.reason)
                    return None

        fetched = await asyncio.gather(*(_fetch_one(src) for src in image_urls))
        images: List[ImageRecord] = []
        for src, res in zip(image_urls, fetched):
            if res is None:
                continue
            ref = self.store.put_image(res.content, source_url=src, content_type=res.content_type)
            images.append(ImageRecord(source_url=src, content_ref=ref))
        return images
