# File: uni_scout/crawler/__init__.py
"""uni_scout.crawler: Ядро обхода — frontier, оценка релевантности, загрузка страниц и планировщик."""

from .collector import ResultCollector
from .exclusion import ExclusionFilter, should_exclude
from .fetcher import PageFetcher
from .frontier import AttemptCounter, Frontier, VisitedSet
from .models import Accepted, CrawlReport, Excluded, Failed, FrontierItem, PageRecord, Redirected
from .scheduler import CrawlScheduler, DomainRunState
from .scoring import RelevanceScorer
from .urls import normalize_url

__all__ = [
    "Accepted",
    "AttemptCounter",
    "CrawlReport",
    "CrawlScheduler",
    "DomainRunState",
    "Excluded",
    "ExclusionFilter",
    "Failed",
    "Frontier",
    "FrontierItem",
    "PageFetcher",
    "PageRecord",
    "Redirected",
    "RelevanceScorer",
    "ResultCollector",
    "VisitedSet",
    "normalize_url",
    "should_exclude",
]
