# uni_scout/crawler/models.py
"""
Data models for the UniScout crawler: frontier items, page records and the
tagged fetch outcomes consumed by the scheduler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from uni_scout.errors import CrawlError


@dataclass(slots=True, frozen=True)
class FrontierItem:
    """A normalized URL waiting in (or dispatched from) the frontier."""

    url: str
    depth: int
    score: int


@dataclass(slots=True, frozen=True)
class PageRecord:
    """An accepted, relevant page. Immutable once created."""

    domain: str
    url: str
    title: str
    extracted_text: str
    timestamp: str
    relevance_score: int
    depth: int
    extraction_method: str

    def to_dict(self) -> Dict[str, Any]:
        """Wire form used for delivery and reports."""
        return {
            "domain": self.domain,
            "url": self.url,
            "title": self.title,
            "content": self.extracted_text,
            "timestamp": self.timestamp,
            "relevanceScore": self.relevance_score,
            "depth": self.depth,
            "extractionMethod": self.extraction_method,
        }


# Fetch outcomes ------------------------------------------------------------


@dataclass(slots=True)
class Accepted:
    """Page had usable content; *record* is None when it was not relevant."""

    record: Optional[PageRecord]
    links: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Redirected:
    new_url: str


@dataclass(slots=True)
class Excluded:
    """No selector produced enough text; harvested links are still usable."""

    reason: CrawlError
    links: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Failed:
    error: CrawlError
    retryable: bool


FetchOutcome = Union[Accepted, Redirected, Excluded, Failed]


# Run summary ---------------------------------------------------------------


@dataclass(slots=True)
class CrawlStats:
    """Counters of one domain run."""

    dispatched: int = 0
    accepted: int = 0
    relevant: int = 0
    redirected: int = 0
    excluded: int = 0
    failed: int = 0
    retried: int = 0
    exhausted: int = 0


@dataclass(slots=True)
class CrawlReport:
    """Everything a finished domain run hands to the delivery layer."""

    domain: str
    records: List[PageRecord] = field(default_factory=list)
    pages_processed: int = 0
    stats: CrawlStats = field(default_factory=CrawlStats)
    delivery_error: Optional[str] = None

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.records]
