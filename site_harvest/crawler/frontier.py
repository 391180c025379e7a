# site_harvest/crawler/frontier.py
"""
Traversal state for one crawl: pending FIFO queue, in-flight and visited sets.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Set

from site_harvest.utils import is_http_url, normalize_url, same_host


class Frontier:
    """Breadth-first frontier with dedup, same-host filtering and a page ceiling.

    Every URL lives in exactly one of ``pending``, ``in_flight`` or ``visited``
    once it has been accepted, and is never accepted a second time.  ``pop``
    stops handing out URLs after ``max_pages`` dispatches; whatever is still
    pending at that point is dropped.
    """

    def __init__(self, max_pages: int) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        self.max_pages = max_pages
        self._pending: Deque[str] = deque()
        self._pending_set: Set[str] = set()
        self._in_flight: Set[str] = set()
        self._visited: Set[str] = set()
        self._dispatched = 0

    def reset(self, seed: str) -> None:
        """Drop all state and enqueue *seed* as the only pending entry."""
        self._pending.clear()
        self._pending_set.clear()
        self._in_flight.clear()
        self._visited.clear()
        self._dispatched = 0
        self.offer(seed)

    def offer(self, url: str, referrer: Optional[str] = None) -> bool:
        """Enqueue *url* unless the ceiling is reached, it was seen before, or it leaves *referrer*'s host."""
        if self.exhausted:
            return False
        url = normalize_url(url)
        if not is_http_url(url):
            return False
        if referrer is not None and not same_host(url, referrer):
            return False
        if url in self._visited or url in self._pending_set or url in self._in_flight:
            return False
        self._pending.append(url)
        self._pending_set.add(url)
        return True

    def pop(self) -> Optional[str]:
        """Next URL in discovery order, or None when empty or the ceiling is reached."""
        if self.exhausted or not self._pending:
            return None
        url = self._pending.popleft()
        self._pending_set.discard(url)
        self._in_flight.add(url)
        self._dispatched += 1
        if self.exhausted:
            self._pending.clear()
            self._pending_set.clear()
        return url

    def mark_visited(self, url: str) -> None:
        url = normalize_url(url)
        self._in_flight.discard(url)
        self._pending_set.discard(url)
        self._visited.add(url)

    @property
    def exhausted(self) -> bool:
        return self._dispatched >= self.max_pages

    @property
    def dispatched(self) -> int:
        return self._dispatched

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def done(self) -> bool:
        """Nothing left to dispatch and nothing still being processed."""
        return (self.exhausted or not self._pending) and not self._in_flight

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        url = normalize_url(url)
        return url in self._pending_set or url in self._in_flight or url in self._visited
