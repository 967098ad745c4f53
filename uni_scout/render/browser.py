# uni_scout/render/browser.py
"""
Headless Chromium renderer built on Playwright.

One browser + context is shared by every fetch of a domain run; each fetch
opens its own tab and always closes it. Images, stylesheets, fonts and media
are aborted through request interception.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, FrozenSet, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Response, Route, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeout

from uni_scout.config import CrawlerConfig
from uni_scout.errors import NavigationTimeout
from uni_scout.logger import logger

__all__ = ("BrowserPage", "BrowserRenderer")

_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class BrowserPage:
    """Adapter from a Playwright page + navigation response to RenderedPage."""

    def __init__(self, page: Page, response: Optional[Response], title: str) -> None:
        self._page = page
        self.final_url = page.url
        self.status = response.status if response is not None else 200
        self.redirect_location = response.headers.get("location") if response is not None else None
        self.title = title

    async def text(self, selector: str) -> Optional[str]:
        handle = await self._page.query_selector(selector)
        if handle is None:
            return None
        return await handle.inner_text()

    async def links(self) -> List[str]:
        return await self._page.eval_on_selector_all("a[href]", "els => els.map(a => a.href)")


class BrowserRenderer:
    """Session-scoped browser renderer; use as ``async with BrowserRenderer(cfg) as r``."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self._blocked: FrozenSet[str] = frozenset(config.blocked_resource_types)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self) -> BrowserRenderer:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless, args=_LAUNCH_ARGS
            )
            self._context = await self._browser.new_context(user_agent=self.config.user_agent)
            if self._blocked:
                await self._context.route("**/*", self._route_handler)
        except BaseException:
            await self.close()
            raise
        logger.info("Browser session started (blocking: %s)", ", ".join(sorted(self._blocked)) or "none")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def _route_handler(self, route: Route) -> None:
        if route.request.resource_type in self._blocked:
            await route.abort()
        else:
            await route.continue_()

    @asynccontextmanager
    async def render(self, url: str, timeout_ms: int) -> AsyncIterator[BrowserPage]:
        if self._context is None:
            raise RuntimeError("Browser session not started")
        page = await self._context.new_page()
        try:
            try:
                response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            except PlaywrightTimeout as exc:
                raise NavigationTimeout(f"Timeout after {timeout_ms}ms in page.goto({url})", url=url) from exc
            yield BrowserPage(page, response, await page.title())
        finally:
            await page.close()
