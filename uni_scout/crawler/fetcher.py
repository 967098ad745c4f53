# uni_scout/crawler/fetcher.py
"""
Fetcher module: drives the render primitive for one frontier item and turns
whatever happens into a single :data:`FetchOutcome` value.

Pending -> Fetching -> Accepted | Redirected | Excluded | Failed
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from uni_scout.config import CrawlerConfig
from uni_scout.crawler.models import Accepted, Excluded, Failed, FetchOutcome, FrontierItem, PageRecord, Redirected
from uni_scout.crawler.scoring import RelevanceScorer
from uni_scout.crawler.urls import hostname, normalize_url, resolve_link, same_host
from uni_scout.errors import CrawlError, HttpFailureStatus, InvalidUrl, NavigationTimeout, NoUsableContent
from uni_scout.logger import logger
from uni_scout.render.base import RenderedPage, Renderer

__all__ = ("PageFetcher",)

MAX_BACKOFF = 60.0


class PageFetcher:
    """Fetches one page at a time through a shared renderer session."""

    def __init__(
        self,
        renderer: Renderer,
        config: CrawlerConfig,
        scorer: RelevanceScorer,
        domain: str,
    ) -> None:
        self.renderer = renderer
        self.config = config
        self.scorer = scorer
        self.domain = domain.lower()

    async def fetch(self, item: FrontierItem, attempt: int = 1) -> FetchOutcome:
        """
        Fetch *item* and classify the result.

        Never raises (except on cancellation): timeouts, bad statuses and any
        unexpected error become a retryable :class:`Failed` outcome.
        """
        logger.info(
            "[D:%d|S:%d] Scraping: %s (attempt %d/%d)",
            item.depth, item.score, item.url, attempt, self.config.retry_attempts,
        )
        try:
            return await asyncio.wait_for(self._fetch(item), timeout=self.config.request_timeout)
        except asyncio.TimeoutError:
            error: CrawlError = NavigationTimeout(
                f"Timeout after {self.config.request_timeout_ms}ms", url=item.url
            )
            retryable = True
        except CrawlError as exc:
            error = exc
            retryable = exc.retryable
        except Exception as exc:
            logger.error("Error crawling %s: %s", item.url, exc)
            error = CrawlError(str(exc) or type(exc).__name__, url=item.url)
            retryable = True

        logger.warning("[D:%d] Failed %s: %s", item.depth, item.url, error)
        if retryable and attempt < self.config.retry_attempts:
            await self._backoff(attempt)
        return Failed(error=error, retryable=retryable)

    async def _fetch(self, item: FrontierItem) -> FetchOutcome:
        async with self.renderer.render(item.url, self.config.request_timeout_ms) as page:
            status = page.status
            if 300 <= status < 400 and status != 304 and page.redirect_location:
                new_url = normalize_url(
                    page.redirect_location, base=item.url, tracking_prefix=self.config.tracking_prefix
                )
                logger.info("[D:%d] Redirected from %s -> %s.", item.depth, item.url, new_url)
                return Redirected(new_url=new_url)
            if not 200 <= status < 300 and status != 304:
                raise HttpFailureStatus(status, url=item.url)

            # links first: they stay usable even when the content is rejected
            links = await self._harvest_links(page)
            found = await self._extract_content(page)
            if found is None:
                logger.warning("No usable content found for %s.", item.url)
                return Excluded(reason=NoUsableContent("no selector matched", url=item.url), links=links)

            text, method = found
            return Accepted(record=self._build_record(page, item, text, method), links=links)

    async def _harvest_links(self, page: RenderedPage) -> List[str]:
        seen: set[str] = set()
        links: List[str] = []
        for href in await page.links():
            try:
                link = resolve_link(href, page.final_url, tracking_prefix=self.config.tracking_prefix)
            except InvalidUrl as exc:
                logger.debug("Discarding link: %s", exc)
                continue
            if link in seen or not same_host(link, self.domain):
                continue
            seen.add(link)
            links.append(link)
        return links

    async def _extract_content(self, page: RenderedPage) -> Optional[Tuple[str, str]]:
        """Return ``(text, "selector:<css>")`` for the first selector with enough text."""
        for group in self.config.selector_groups:
            for selector in group:
                try:
                    text = await page.text(selector)
                except Exception as exc:
                    logger.debug("Selector %s failed on %s: %s", selector, page.final_url, exc)
                    continue
                if text and len(text.strip()) > self.config.content_min_length:
                    return text.strip(), f"selector:{selector}"
        return None

    def _build_record(
        self, page: RenderedPage, item: FrontierItem, text: str, method: str
    ) -> Optional[PageRecord]:
        final_url = page.final_url or item.url
        path = urlsplit(final_url).path
        title = page.title or ""
        if not self.scorer.is_relevant(title, path, text):
            return None
        logger.info("Relevant content saved for %s", final_url)
        return PageRecord(
            domain=hostname(final_url),
            url=normalize_url(final_url, tracking_prefix=self.config.tracking_prefix),
            title=title,
            extracted_text=text[: self.config.content_max_length],
            timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            relevance_score=self.scorer.content_score(title, path, text),
            depth=item.depth,
            extraction_method=method,
        )

    async def _backoff(self, attempt: int) -> None:
        delay = min(MAX_BACKOFF, self.config.retry_delay_ms * attempt / 1000)
        if delay > 0:
            logger.debug("Backing off %.2f s before next attempt", delay)
            await asyncio.sleep(delay)
