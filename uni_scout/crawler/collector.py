# uni_scout/crawler/collector.py
"""
Append-only holder for accepted page records of one domain run.
"""
from __future__ import annotations

from typing import List

from uni_scout.crawler.models import PageRecord


class ResultCollector:
    """Collects :class:`PageRecord` objects; performs no I/O."""

    def __init__(self) -> None:
        self._records: List[PageRecord] = []

    def add(self, record: PageRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> List[PageRecord]:
        """Snapshot copy of everything collected so far."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
