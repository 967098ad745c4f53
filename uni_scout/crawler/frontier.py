# uni_scout/crawler/frontier.py
"""
Crawl frontier: score-ordered work queue plus the visited set and per-item
attempt counter of one domain run.

All three are mutated only by the scheduler's coordinating coroutine, so none
of them needs a lock.
"""
from __future__ import annotations

import heapq
import itertools
from typing import Dict, List, Set, Tuple

from uni_scout.crawler.exclusion import ExclusionFilter
from uni_scout.crawler.models import FrontierItem
from uni_scout.logger import logger

__all__ = ("Frontier", "VisitedSet", "AttemptCounter")


class VisitedSet:
    """Normalized URLs enqueued or fetched during the current run."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()

    def add(self, url: str) -> None:
        self._urls.add(url)

    def __contains__(self, url: object) -> bool:
        return url in self._urls


class AttemptCounter:
    """Monotonic attempt count per ``(url, depth)``."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._counts: Dict[Tuple[str, int], int] = {}

    def increment(self, url: str, depth: int) -> int:
        key = (url, depth)
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]

    def get(self, url: str, depth: int) -> int:
        return self._counts.get((url, depth), 0)

    def exhausted(self, url: str, depth: int) -> bool:
        return self.get(url, depth) > self.limit


class Frontier:
    """
    Max-priority queue of :class:`FrontierItem` with admission control.

    ``offer`` is the single choke point for new URLs: an accepted URL is put
    into the visited set immediately, so two fetches discovering the same link
    can never both enqueue it.
    """

    def __init__(
        self,
        visited: VisitedSet,
        exclusion: ExclusionFilter,
        max_depth: int,
        min_score: int,
    ) -> None:
        self.visited = visited
        self.exclusion = exclusion
        self.max_depth = max_depth
        self.min_score = min_score
        self._heap: List[Tuple[int, int, FrontierItem]] = []
        self._seq = itertools.count()

    def accepts(self, url: str, depth: int, score: int, *, enforce_min_score: bool = True) -> bool:
        """Admission test without side effects."""
        if url in self.visited:
            return False
        if depth > self.max_depth:
            return False
        if enforce_min_score and score < self.min_score:
            return False
        if self.exclusion.excludes_url(url):
            logger.debug("Excluded by policy: %s", url)
            return False
        return True

    def offer(self, url: str, depth: int, score: int, *, enforce_min_score: bool = True) -> bool:
        """Admit a new item; returns False if it was dropped."""
        if not self.accepts(url, depth, score, enforce_min_score=enforce_min_score):
            return False
        self.visited.add(url)
        self._push(FrontierItem(url=url, depth=depth, score=score))
        return True

    def requeue(self, item: FrontierItem) -> None:
        """Put an already-admitted item back for another attempt."""
        self._push(item)

    def pop(self) -> FrontierItem:
        """Remove and return the highest-scoring item (FIFO among ties)."""
        if not self._heap:
            raise IndexError("pop from empty frontier")
        return heapq.heappop(self._heap)[2]

    def _push(self, item: FrontierItem) -> None:
        heapq.heappush(self._heap, (-item.score, next(self._seq), item))

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
