"""site_harvest.storage: content-addressed blobs and page records."""
from site_harvest.storage.content_store import ContentStore
from site_harvest.storage.records import (
    InMemoryRecordStore,
    JsonlRecordStore,
    RecordStore,
    open_record_store,
)

__all__ = ["ContentStore", "RecordStore", "InMemoryRecordStore", "JsonlRecordStore", "open_record_store"]
