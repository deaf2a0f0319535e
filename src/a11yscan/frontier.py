"""
Breadth-first work queue with a seen-set and a permanent discovery record.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, Set, Tuple

from a11yscan.errors import FrontierEmpty


class Frontier:
    """
    FIFO queue of URLs awaiting processing.

    Every URL accepted is marked seen and appended to the discovery record,
    which is never reordered or shrunk. max_pages caps the discovery record
    and therefore also what can ever be queued.
    """

    def __init__(self, max_pages: int) -> None:
        self.max_pages = max_pages
        self._queue: Deque[str] = deque()
        self._seen: Set[str] = set()
        self._discovered: List[str] = []

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    @property
    def discovered(self) -> Tuple[str, ...]:
        return tuple(self._discovered)

    @property
    def is_full(self) -> bool:
        return len(self._discovered) >= self.max_pages

    def seen(self, url: str) -> bool:
        return url in self._seen

    def seed(self, url: str) -> None:
        """Record the start URL as discovered at rank 0 and queue it."""
        self._accept(url)

    def offer(self, url: str) -> bool:
        """Accept url unless already seen or the discovery cap is reached."""
        if url in self._seen or self.is_full:
            return False
        self._accept(url)
        return True

    def dequeue_next(self) -> str:
        if not self._queue:
            raise FrontierEmpty("frontier is empty")
        return self._queue.popleft()

    def _accept(self, url: str) -> None:
        self._seen.add(url)
        self._discovered.append(url)
        self._queue.append(url)
