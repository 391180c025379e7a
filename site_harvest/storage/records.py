# site_harvest/storage/records.py
"""
Record persistence: one durable entry per crawled page, with its image records
keyed to the page's identifier.
"""
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol, Union

from site_harvest.crawler.models import ImageRecord, PageRecord
from site_harvest.errors import StoreError
from site_harvest.logger import get_logger

__all__ = ("RecordStore", "InMemoryRecordStore", "JsonlRecordStore", "open_record_store")

log = get_logger("records")


class RecordStore(Protocol):
    def save(self, record: PageRecord) -> PageRecord: ...

    def count_pages(self) -> int: ...

    def count_images(self) -> int: ...


class InMemoryRecordStore:
    """Keeps records for the lifetime of the process; ids start at 1."""

    def __init__(self) -> None:
        self._pages: Dict[int, PageRecord] = {}

    def save(self, record: PageRecord) -> PageRecord:
        record_id = len(self._pages) + 1
        saved = replace(record, record_id=record_id)
        self._pages[record_id] = saved
        return saved

    def get(self, record_id: int) -> Optional[PageRecord]:
        return self._pages.get(record_id)

    def __iter__(self) -> Iterator[PageRecord]:
        return iter(self._pages.values())

    def count_pages(self) -> int:
        return len(self._pages)

    def count_images(self) -> int:
        return sum(len(p.images) for p in self._pages.values())


class JsonlRecordStore:
    """Append-only JSON-lines file; ids continue from whatever the file already holds."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._pages = 0
        self._images = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.is_file():
                for entry in self._read_entries():
                    self._pages += 1
                    self._images += len(entry.get("images", []))
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreError(f"Cannot open record file {self.path}: {exc}") from exc

    def _read_entries(self) -> Iterator[Dict[str, Any]]:
        with self.path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, 1):
                if not line.strip():
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError:
                    log.warning("Skipping corrupt record at %s:%d", self.path, lineno)

    def save(self, record: PageRecord) -> PageRecord:
        record_id = self._pages + 1
        entry = {
            "id": record_id,
            "url": record.url,
            "text_file": record.content_ref,
            "images": [
                {"scraped_data_id": record_id, **img.to_dict()} for img in record.images
            ],
        }
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise StoreError(f"Cannot append to record file {self.path}: {exc}") from exc
        self._pages += 1
        self._images += len(record.images)
        return replace(record, record_id=record_id)

    def load(self) -> List[PageRecord]:
        """Read every stored record back (used by reports and tests)."""
        if not self.path.is_file():
            return []
        return [
            PageRecord(
                url=entry["url"],
                content_ref=entry["text_file"],
                images=tuple(ImageRecord(img["url"], img["filename"]) for img in entry.get("images", [])),
                record_id=entry.get("id"),
            )
            for entry in self._read_entries()
        ]

    def count_pages(self) -> int:
        return self._pages

    def count_images(self) -> int:
        return self._images


def open_record_store(path: Union[str, Path, None]) -> RecordStore:
    """JSONL store when a path is configured, in-memory otherwise."""
    if path is None:
        return InMemoryRecordStore()
    return JsonlRecordStore(path)
