# uni_scout/render/http.py
"""
Plain HTTP renderer: aiohttp for transport, BeautifulSoup for the DOM.

Redirects are not followed so that the fetcher sees the 3xx status and the
``Location`` header itself. No sub-resources are ever requested, so there is
nothing to filter by resource type.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from aiohttp import ClientSession, ClientTimeout
from bs4 import BeautifulSoup
from bs4.element import Tag

from uni_scout.config import CrawlerConfig

__all__ = ("HtmlPage", "HttpRenderer")

_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


class HtmlPage:
    """Static HTML document exposing the :class:`RenderedPage` interface."""

    def __init__(
        self,
        final_url: str,
        status: int,
        html: str,
        redirect_location: Optional[str] = None,
    ) -> None:
        self.final_url = final_url
        self.status = status
        self.redirect_location = redirect_location
        self._soup = BeautifulSoup(html or "", "html.parser")
        for element in self._soup(_INVISIBLE_TAGS):
            element.decompose()
        title_tag = self._soup.find("title")
        self.title = title_tag.get_text(strip=True) if title_tag else ""

    async def text(self, selector: str) -> Optional[str]:
        node = self._soup.select_one(selector)
        if node is None:
            return None
        return "\n".join(node.stripped_strings)

    async def links(self) -> List[str]:
        hrefs: List[str] = []
        for tag in self._soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if isinstance(href, str):
                hrefs.append(href)
        return hrefs


class HttpRenderer:
    """Session-scoped HTTP renderer; use as ``async with HttpRenderer(cfg) as r``."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> HttpRenderer:
        self.session = ClientSession(
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @asynccontextmanager
    async def render(self, url: str, timeout_ms: int) -> AsyncIterator[HtmlPage]:
        if not self.session:
            raise RuntimeError("Session not initialized")
        timeout = ClientTimeout(total=timeout_ms / 1000)
        async with self.session.get(url, allow_redirects=False, timeout=timeout) as resp:
            location = resp.headers.get("Location")
            ctype = resp.headers.get("Content-Type", "").lower()
            html = ""
            if 200 <= resp.status < 300 and ("html" in ctype or not ctype):
                html = await resp.text(errors="replace")
            yield HtmlPage(str(resp.url), resp.status, html, redirect_location=location)
