# File: tests/test_content_store.py
import hashlib

import pytest

from conftest import GIF_BYTES, PNG_BYTES
from site_harvest.errors import StoreError
from site_harvest.storage.content_store import ContentStore, infer_image_extension


def test_put_is_idempotent(tmp_path):
    store = ContentStore(tmp_path)
    first = store.put_text("hello world")
    second = store.put_text("hello world")
    assert first == second
    assert first == hashlib.sha256(b"hello world").hexdigest() + ".txt"
    assert store.writes == 1
    assert store.read(first) == b"hello world"


def test_identical_bytes_from_different_urls_share_a_ref(tmp_path):
    store = ContentStore(tmp_path)
    a = store.put_image(PNG_BYTES, source_url="http://example.com/a.png", content_type="image/png")
    b = store.put_image(PNG_BYTES, source_url="http://example.com/copy/b.png", content_type="image/png")
    assert a == b
    assert store.writes == 1
    assert [p.name for p in tmp_path.iterdir()] == [a]


def test_different_content_gets_different_refs(tmp_path):
    store = ContentStore(tmp_path)
    assert store.put_text("one") != store.put_text("two")
    assert store.writes == 2


def test_existing_blob_is_never_overwritten(tmp_path):
    store = ContentStore(tmp_path)
    ref = store.put_text("original")
    # tamper with the blob; a second put must leave it alone
    store.path_for(ref).write_text("tampered", encoding="utf-8")
    assert store.put_text("original") == ref
    assert store.path_for(ref).read_text(encoding="utf-8") == "tampered"


def test_fresh_store_sees_blobs_written_earlier(tmp_path):
    ContentStore(tmp_path).put_text("persisted")
    again = ContentStore(tmp_path)
    again.put_text("persisted")
    assert again.writes == 0


@pytest.mark.parametrize(
    "data,url,ctype,expected",
    [
        (PNG_BYTES, "http://x/img", None, ".png"),
        (b"\xff\xd8\xff\xe0rest", "http://x/photo.png", "image/png", ".jpg"),
        (GIF_BYTES, "", None, ".gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "", None, ".webp"),
        (b"  <svg xmlns='http://www.w3.org/2000/svg'></svg>", "", None, ".svg"),
        (b"unknown", "http://x/pic", "image/jpeg", ".jpg"),
        (b"unknown", "http://x/pic.TIFF", None, ".tiff"),
        (b"unknown", "http://x/pic", None, ".bin"),
    ],
)
def test_infer_image_extension(data, url, ctype, expected):
    assert infer_image_extension(data, url, ctype) == expected


def test_unwritable_root_raises_store_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(StoreError):
        ContentStore(blocker / "blobs")


def test_write_failure_raises_store_error(tmp_path):
    store = ContentStore(tmp_path / "blobs")
    store.root.rmdir()
    store.root.write_text("now a file", encoding="utf-8")
    with pytest.raises(StoreError):
        store.put_text("payload")
