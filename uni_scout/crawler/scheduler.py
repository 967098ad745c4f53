# uni_scout/crawler/scheduler.py
"""
Bounded-concurrency scheduler for one domain run.

A single coordinating coroutine owns the :class:`DomainRunState`: it pops the
best frontier item while pool capacity and page budget allow, starts a fetch
task for it, then sleeps until at least one task finishes and folds the
outcome back into the frontier.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from uni_scout.config import CrawlerConfig
from uni_scout.crawler.collector import ResultCollector
from uni_scout.crawler.exclusion import ExclusionFilter
from uni_scout.crawler.fetcher import PageFetcher
from uni_scout.crawler.frontier import AttemptCounter, Frontier, VisitedSet
from uni_scout.crawler.models import (
    Accepted,
    CrawlReport,
    CrawlStats,
    Excluded,
    Failed,
    FetchOutcome,
    FrontierItem,
    Redirected,
)
from uni_scout.crawler.scoring import RelevanceScorer
from uni_scout.crawler.urls import normalize_url, same_host
from uni_scout.errors import RetryBudgetExhausted
from uni_scout.logger import logger
from uni_scout.render.base import Renderer

__all__ = ("DomainRunState", "CrawlScheduler")


@dataclass
class DomainRunState:
    """Mutable state of one domain crawl: construct, run, drain, discard."""

    domain: str
    frontier: Frontier
    visited: VisitedSet
    attempts: AttemptCounter
    collector: ResultCollector = field(default_factory=ResultCollector)
    pages_processed: int = 0
    stats: CrawlStats = field(default_factory=CrawlStats)

    @classmethod
    def create(cls, domain: str, config: CrawlerConfig, exclusion: ExclusionFilter) -> DomainRunState:
        visited = VisitedSet()
        frontier = Frontier(
            visited=visited,
            exclusion=exclusion,
            max_depth=config.max_depth,
            min_score=config.min_score_to_enqueue,
        )
        return cls(
            domain=domain.lower(),
            frontier=frontier,
            visited=visited,
            attempts=AttemptCounter(config.retry_attempts),
        )

    def report(self) -> CrawlReport:
        return CrawlReport(
            domain=self.domain,
            records=self.collector.records,
            pages_processed=self.pages_processed,
            stats=self.stats,
        )


class CrawlScheduler:
    """Runs the frontier → fetcher → frontier loop for a single domain."""

    def __init__(self, config: CrawlerConfig, renderer: Renderer, domain: str) -> None:
        self.config = config
        self.domain = domain.lower()
        self.exclusion = ExclusionFilter(config.exclusion)
        self.scorer = RelevanceScorer(
            config.max_depth,
            relevant_keywords=config.relevant_keywords,
            high_priority_keywords=config.high_priority_keywords,
        )
        self.fetcher = PageFetcher(renderer, config, self.scorer, self.domain)
        #: highest number of simultaneously running fetch tasks observed
        self.peak_in_flight = 0

    def new_state(self) -> DomainRunState:
        return DomainRunState.create(self.domain, self.config, self.exclusion)

    def seed(self, state: DomainRunState, seed_urls: Iterable[str]) -> int:
        """Queue seed URLs at depth 0 with the sentinel score."""
        queued = 0
        for raw in seed_urls:
            url = normalize_url(raw, tracking_prefix=self.config.tracking_prefix)
            if not same_host(url, self.domain):
                logger.warning("Seed %s is not on %s, skipped", raw, self.domain)
                continue
            if state.frontier.offer(url, 0, self.config.seed_score, enforce_min_score=False):
                queued += 1
            else:
                logger.info("Seed %s skipped (duplicate or excluded)", url)
        return queued

    async def run(self, seed_urls: Iterable[str]) -> CrawlReport:
        seeds = list(seed_urls)
        state = self.new_state()
        self.seed(state, seeds)
        logger.info("Processing domain: %s with %d seed URLs.", self.domain, len(seeds))
        await self.drive(state)
        logger.info(
            "Finished %s: %d pages processed, %d relevant records",
            self.domain, state.pages_processed, len(state.collector),
        )
        return state.report()

    async def drive(self, state: DomainRunState) -> None:
        """Dispatch and collect until the frontier is drained or the budget is spent."""
        in_flight: Dict[asyncio.Task[FetchOutcome], FrontierItem] = {}
        budget_logged = False
        try:
            while True:
                while len(in_flight) < self.config.concurrent_pages and state.frontier:
                    if state.pages_processed >= self.config.max_pages_per_domain:
                        if not budget_logged:
                            logger.info(
                                "Max pages (%d) reached for %s.", self.config.max_pages_per_domain, self.domain
                            )
                            budget_logged = True
                        break
                    item = state.frontier.pop()
                    task = self._dispatch(state, item)
                    if task is not None:
                        in_flight[task] = item
                        self.peak_in_flight = max(self.peak_in_flight, len(in_flight))

                if not in_flight:
                    break

                done, _ = await asyncio.wait(set(in_flight), return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    item = in_flight.pop(task)
                    self.apply(state, item, task.result())
        finally:
            if in_flight:
                for task in in_flight:
                    task.cancel()
                await asyncio.gather(*in_flight, return_exceptions=True)

    def _dispatch(self, state: DomainRunState, item: FrontierItem) -> asyncio.Task[FetchOutcome] | None:
        attempt = state.attempts.increment(item.url, item.depth)
        if state.attempts.exhausted(item.url, item.depth):
            self.apply(state, item, Failed(RetryBudgetExhausted(item.url, attempt - 1), retryable=False))
            return None
        state.pages_processed += 1
        state.stats.dispatched += 1
        return asyncio.create_task(self.fetcher.fetch(item, attempt), name=f"fetch:{item.url}")

    def apply(self, state: DomainRunState, item: FrontierItem, outcome: FetchOutcome) -> None:
        """Fold one fetch outcome back into the run state."""
        if isinstance(outcome, Accepted):
            state.stats.accepted += 1
            if outcome.record is not None:
                state.collector.add(outcome.record)
                state.stats.relevant += 1
            self._enqueue_links(state, item, outcome.links)
        elif isinstance(outcome, Excluded):
            state.stats.excluded += 1
            self._enqueue_links(state, item, outcome.links)
        elif isinstance(outcome, Redirected):
            state.stats.redirected += 1
            self._enqueue_redirect(state, item, outcome.new_url)
        elif isinstance(outcome, Failed):
            self._handle_failure(state, item, outcome)
        else:  # pragma: no cover
            raise TypeError(f"unknown fetch outcome: {outcome!r}")

    def _enqueue_redirect(self, state: DomainRunState, item: FrontierItem, new_url: str) -> None:
        if not same_host(new_url, self.domain):
            logger.info("Redirect target %s leaves %s, dropped", new_url, self.domain)
            return
        score = self.scorer.priority_score(new_url, item.depth)
        state.frontier.offer(new_url, item.depth, score, enforce_min_score=False)

    def _enqueue_links(self, state: DomainRunState, item: FrontierItem, links: List[str]) -> None:
        depth = item.depth + 1
        candidates: List[Tuple[int, str]] = []
        for link in links:
            score = self.scorer.priority_score(link, depth)
            if state.frontier.accepts(link, depth, score):
                candidates.append((score, link))
        if self.config.max_links_per_page is not None:
            candidates.sort(key=lambda c: c[0], reverse=True)
            candidates = candidates[: self.config.max_links_per_page]
        admitted = sum(state.frontier.offer(link, depth, score) for score, link in candidates)
        if links:
            logger.debug("[D:%d] %s: %d/%d links queued", item.depth, item.url, admitted, len(links))

    def _handle_failure(self, state: DomainRunState, item: FrontierItem, outcome: Failed) -> None:
        if isinstance(outcome.error, RetryBudgetExhausted):
            state.stats.exhausted += 1
            logger.warning("Max retry attempts reached for %s, skipping.", item.url)
            return
        state.stats.failed += 1
        if not outcome.retryable:
            return
        if state.attempts.get(item.url, item.depth) >= state.attempts.limit:
            state.stats.exhausted += 1
            logger.warning("Max retry attempts reached for %s, skipping.", item.url)
            return
        state.stats.retried += 1
        state.frontier.requeue(item)
