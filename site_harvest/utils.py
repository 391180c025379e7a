# File: site_harvest/utils.py
"""site_harvest.utils: Утилитарные функции для обработки URL."""

from __future__ import annotations

from typing import Collection, List, Sequence
from urllib.parse import urldefrag, urlparse

from site_harvest.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_http_url",
    "extract_domain",
    "same_host",
    "remove_duplicates",
)


def normalize_url(url: str) -> str:
    """Убирает фрагмент (#...) и окружающие пробелы; больше ничего не меняет.

    Trailing slashes, letter case and query order are significant, so
    ``/a`` and ``/a/`` are different frontier entries.
    """
    return urldefrag(url.strip())[0]


def is_http_url(url: str) -> bool:
    """Проверяет, что URL абсолютный и использует http(s)."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_domain(url: str) -> str:
    """Возвращает host из URL в нижнем регистре (без порта и userinfo), либо пустую строку."""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def same_host(url: str, other: str) -> bool:
    """True, если у обоих URL один и тот же host; порт и схема не учитываются."""
    host = extract_domain(url)
    valid = bool(host) and host == extract_domain(other)
    logger.debug("Same host: %s vs %s -> %s", url, other, valid)
    return valid


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
