# site_harvest/crawler/fetcher.py
"""
Fetcher module: single GET requests with a bounded timeout and redirect limit.

Retries are not done here; wrap a :class:`Fetcher` in :class:`RetryingFetcher`
to add them as a policy.
"""
from __future__ import annotations

import asyncio
from typing import Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL, TooManyRedirects

from site_harvest.config import HarvestConfig
from site_harvest.crawler.models import FetchedResource, ResourceKind
from site_harvest.errors import FetchError
from site_harvest.logger import get_logger

__all__ = ("ResourceFetcher", "Fetcher", "RetryingFetcher", "open_session", "RETRY_STATUS")

log = get_logger("fetcher")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

_PAGE_MIME_TYPES = frozenset({"", "application/xhtml+xml", "application/xml"})


class ResourceFetcher(Protocol):
    async def fetch(self, url: str, kind: ResourceKind) -> FetchedResource: ...


def open_session(config: HarvestConfig) -> ClientSession:
    """Create the aiohttp session every fetch of one crawl shares."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Issues exactly one GET per call and reports failures as :class:`FetchError`."""

    def __init__(self, session: ClientSession, config: HarvestConfig) -> None:
        self.session = session
        self.config = config

    async def fetch(self, url: str, kind: ResourceKind = ResourceKind.PAGE) -> FetchedResource:
        """
        Fetch *url* and return its raw bytes.

        Raises FetchError on timeout, connection failure, non-2xx status,
        too many redirects or (for pages) a non-textual content type.
        """
        redirects = self.config.max_redirects
        try:
            async with self.session.get(
                url,
                allow_redirects=redirects > 0,
                # aiohttp raises once the redirect count reaches max_redirects
                max_redirects=redirects + 1,
            ) as resp:
                status = resp.status
                if not 200 <= status < 300:
                    raise FetchError(
                        url,
                        f"HTTP {status}",
                        status=status,
                        transient=status in RETRY_STATUS,
                    )
                content_type = resp.headers.get("Content-Type", "")
                if kind is ResourceKind.PAGE and not _is_page_type(content_type):
                    raise FetchError(url, f"unsupported content type {content_type!r}", status=status)
                data = await resp.read()
        except TooManyRedirects as exc:
            raise FetchError(url, f"more than {redirects} redirects") from exc
        except InvalidURL as exc:
            raise FetchError(url, f"invalid URL: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.config.timeout}s", transient=True) from exc
        except ClientError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}", transient=True) from exc
        log.debug("Fetched %s %s (%d bytes, %s)", kind.value, url, len(data), content_type or "?")
        return FetchedResource(url=url, content=data, content_type=content_type)


class RetryingFetcher:
    """Retry policy around another fetcher: transient failures only, capped exponential backoff."""

    def __init__(self, inner: ResourceFetcher, retry_times: int, backoff: float = 1.0) -> None:
        self.inner = inner
        self.retry_times = retry_times
        self.backoff = backoff

    async def fetch(self, url: str, kind: ResourceKind = ResourceKind.PAGE) -> FetchedResource:
        attempts = 0
        while True:
            try:
                return await self.inner.fetch(url, kind)
            except FetchError as exc:
                attempts += 1
                if not exc.transient or attempts > self.retry_times:
                    raise
                delay = min(self.backoff * 2**attempts, 60)
                log.debug("Retry %d/%d for %s after %.2f s (%s)", attempts, self.retry_times, url, delay, exc.reason)
                await asyncio.sleep(delay)


def _is_page_type(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime.startswith("text/") or mime in _PAGE_MIME_TYPES
