# File: site_harvest/engine.py
"""site_harvest.engine: точка вызова обхода для CLI и внешнего API-слоя."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from site_harvest.config import CrawlRequest, HarvestConfig, load_config
from site_harvest.crawler.crawler import AsyncCrawler
from site_harvest.crawler.models import CrawlSummary
from site_harvest.errors import InvalidInput, StoreError
from site_harvest.logger import logger
from site_harvest.storage.content_store import ContentStore
from site_harvest.storage.records import RecordStore, open_record_store

__all__ = ["Engine", "run_crawl", "crawl_summary"]


async def crawl_summary(
    seed_url: Any,
    max_pages: Any = None,
    *,
    config: Optional[HarvestConfig] = None,
    store: Optional[ContentStore] = None,
    records: Optional[RecordStore] = None,
) -> CrawlSummary:
    """Проверяет запрос и выполняет обход, возвращая CrawlSummary.

    InvalidInput is raised before any network activity; StoreError aborts the
    crawl. Page- and image-level failures never surface here.
    """
    cfg = config or HarvestConfig()
    try:
        request = CrawlRequest.build(seed_url, max_pages, cfg)
    except InvalidInput as exc:
        logger.error("Rejected crawl request: %s", exc)
        raise

    try:
        content_store = store or ContentStore(cfg.storage_dir)
        record_store = records if records is not None else open_record_store(cfg.records_path)
        async with AsyncCrawler(cfg, content_store, record_store) as crawler:
            return await crawler.crawl(request)
    except StoreError as exc:
        logger.error("Crawl of %s aborted, storage unavailable: %s", request.seed_url, exc)
        raise


async def run_crawl(
    seed_url: Any,
    max_pages: Any = None,
    *,
    config: Optional[HarvestConfig] = None,
    store: Optional[ContentStore] = None,
    records: Optional[RecordStore] = None,
) -> Dict[str, Any]:
    """Запускает обход и возвращает ответ вида ``{"scraped_pages": N, "data": [...]}``."""
    summary = await crawl_summary(seed_url, max_pages, config=config, store=store, records=records)
    return summary.to_response()


class Engine:
    """Фасад для CLI и тестов: загрузка конфига и синхронный запуск обхода."""

    @staticmethod
    def load_config(path: Optional[str]) -> HarvestConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(self, config: Optional[HarvestConfig] = None) -> None:
        self.config = config or HarvestConfig()
        self.records: RecordStore = open_record_store(self.config.records_path)

    def start_crawl(self, seed_url: Any, max_pages: Any = None) -> Dict[str, Any]:
        """Запускает обход в новом event loop и возвращает ответ для API-слоя."""
        logger.info("Starting crawl of %s", seed_url)
        return asyncio.run(run_crawl(seed_url, max_pages, config=self.config, records=self.records))

    def stats(self) -> Dict[str, int]:
        """Счётчики страниц и изображений для панели администратора."""
        return {"pages": self.records.count_pages(), "images": self.records.count_images()}
