# site_harvest/storage/content_store.py
"""
Content-addressed blob storage: every payload is stored under the SHA-256 of
its own bytes plus an extension, and an existing blob is never rewritten.
"""
from __future__ import annotations

import hashlib
import mimetypes
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import urlparse

from site_harvest.errors import StoreError
from site_harvest.logger import get_logger

__all__ = ("ContentStore", "content_ref_for", "infer_image_extension")

log = get_logger("store")

TEXT_EXTENSION = ".txt"
DEFAULT_EXTENSION = ".bin"

# (magic prefix, extension); checked in order
_MAGIC = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
    (b"BM", ".bmp"),
    (b"\x00\x00\x01\x00", ".ico"),
)

# mimetypes maps some image types to unusual extensions
_MIME_OVERRIDES = {"image/jpeg": ".jpg", "image/svg+xml": ".svg", "image/webp": ".webp"}


def content_ref_for(data: bytes, extension: str) -> str:
    """Deterministic handle for *data*: ``<sha256 hex><extension>``."""
    if extension and not extension.startswith("."):
        extension = "." + extension
    return hashlib.sha256(data).hexdigest() + extension.lower()


def infer_image_extension(
    data: bytes, source_url: str = "", content_type: Optional[str] = None
) -> str:
    """Extension for an image: magic bytes first, then Content-Type, then the URL suffix."""
    for magic, ext in _MAGIC:
        if data.startswith(magic):
            return ext
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"
    head = data[:256].lstrip().lower()
    if head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in data[:1024].lower()):
        return ".svg"

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime:
        ext = _MIME_OVERRIDES.get(mime) or mimetypes.guess_extension(mime)
        if ext:
            return ext

    suffix = PurePosixPath(urlparse(source_url).path).suffix.lower()
    if suffix and len(suffix) <= 6 and suffix[1:].isalnum():
        return suffix
    return DEFAULT_EXTENSION


class ContentStore:
    """Write-once, content-addressed storage rooted at a flat directory."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Cannot create storage directory {self.root}: {exc}") from exc
        self.writes = 0

    def path_for(self, content_ref: str) -> Path:
        return self.root / content_ref

    def exists(self, content_ref: str) -> bool:
        return self.path_for(content_ref).is_file()

    def put(self, data: bytes, extension: str = DEFAULT_EXTENSION) -> str:
        """Store *data* unless an identical blob is already present; return its ref."""
        ref = content_ref_for(data, extension)
        target = self.path_for(ref)
        if target.is_file():
            log.debug("Content %s already stored, skipping write", ref)
            return ref
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Cannot write {target}: {exc}") from exc
        self.writes += 1
        log.debug("Stored %s (%d bytes)", ref, len(data))
        return ref

    def put_text(self, text: str) -> str:
        return self.put(text.encode("utf-8"), TEXT_EXTENSION)

    def put_image(self, data: bytes, source_url: str = "", content_type: Optional[str] = None) -> str:
        return self.put(data, infer_image_extension(data, source_url, content_type))

    def read(self, content_ref: str) -> bytes:
        return self.path_for(content_ref).read_bytes()
