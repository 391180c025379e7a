# === FILE: site_harvest/crawler/extractor.py ===
"""HTML extraction for SiteHarvest.

:func:`parse_html` turns one fetched document into an :class:`ExtractedPage`:

* ``text``: concatenated visible text of ``<body>``, whitespace collapsed.
* ``image_urls``: absolute ``<img src>`` URLs (relative ones resolved, not dropped).
* ``link_urls``: absolute ``<a href>`` URLs on the same host as the page.

Parsing is best-effort: ``html.parser`` recovers from broken markup, so the
function never raises on malformed input and simply returns whatever it found.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_harvest.crawler.models import ExtractedPage
from site_harvest.utils import is_http_url, normalize_url, remove_duplicates, same_host

__all__: Sequence[str] = ("parse_html", "extract_text", "extract_images", "extract_links")

_INVISIBLE_TAGS = ("script", "style", "noscript", "template", "head")
_SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def _attr_values(soup: BeautifulSoup, tag_name: str, attr: str) -> Iterable[str]:
    for tag in soup.find_all(tag_name):
        if not isinstance(tag, Tag):
            continue
        value = tag.get(attr)
        if isinstance(value, str) and value.strip():
            yield value.strip()


def _resolve(base_url: str, raw: str) -> Optional[str]:
    if raw.lower().startswith(_SKIPPED_SCHEMES):
        return None
    try:
        absolute = normalize_url(urljoin(base_url, raw))
    except ValueError:
        # urljoin rejects e.g. malformed IPv6 hosts
        return None
    return absolute if is_http_url(absolute) else None


def extract_text(soup: BeautifulSoup) -> str:
    """Visible text of the body (or the whole document when there is no body)."""
    root = soup.body or soup
    for element in root.find_all(_INVISIBLE_TAGS):
        element.decompose()
    # text nodes are concatenated without separators, as textContent does
    return " ".join(root.get_text().split())


def extract_images(soup: BeautifulSoup, base_url: str) -> List[str]:
    urls = (_resolve(base_url, src) for src in _attr_values(soup, "img", "src"))
    return remove_duplicates([u for u in urls if u])


def extract_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    urls = (_resolve(base_url, href) for href in _attr_values(soup, "a", "href"))
    return remove_duplicates([u for u in urls if u and same_host(u, base_url)])


def parse_html(html: Union[bytes, str], base_url: str, encoding: Optional[str] = None) -> ExtractedPage:
    """Parse raw HTML into text, image URLs and same-host link URLs.

    Parameters
    ----------
    html
        Document markup; bytes are decoded by BeautifulSoup (``encoding`` is a hint).
    base_url
        URL the document was fetched from, used to resolve relative references.
    """
    if isinstance(html, bytes):
        soup = BeautifulSoup(html, "html.parser", from_encoding=encoding)
    else:
        soup = BeautifulSoup(html, "html.parser")

    # links and images first: extract_text() removes invisible subtrees in place
    images = extract_images(soup, base_url)
    links = extract_links(soup, base_url)
    text = extract_text(soup)
    return ExtractedPage(text=text, image_urls=tuple(images), link_urls=tuple(links))
