# File: tests/conftest.py
import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional, Union

import pytest

from uni_scout.config import CrawlerConfig

DOMAIN = "example.edu"
ROOT = f"https://{DOMAIN}/"

#: длинный релевантный текст (> content_min_length)
RELEVANT_TEXT = (
    "Apply to our undergraduate admissions program and explore every degree we offer. " * 6
).strip()
#: текст без ключевых слов
NEUTRAL_TEXT = ("Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 8).strip()


class FakePage:
    """RenderedPage без браузера: тексты по селекторам и список href."""

    def __init__(
        self,
        url: str,
        status: int = 200,
        title: str = "",
        texts: Optional[Dict[str, str]] = None,
        links: Iterable[str] = (),
        redirect_location: Optional[str] = None,
    ):
        self.final_url = url
        self.status = status
        self.title = title
        self.redirect_location = redirect_location
        self.texts = dict(texts or {})
        self._links = list(links)

    async def text(self, selector: str) -> Optional[str]:
        return self.texts.get(selector)

    async def links(self) -> List[str]:
        return list(self._links)


PageEntry = Union[FakePage, BaseException, type]


class FakeRenderer:
    """
    Renderer с заранее заданными страницами.

    Значение в pages: FakePage, экземпляр исключения или класс исключения.
    Неизвестный URL отдаёт страницу со статусом 404.
    """

    def __init__(self, pages: Optional[Dict[str, PageEntry]] = None, delay: float = 0.0):
        self.pages: Dict[str, PageEntry] = dict(pages or {})
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.opened = 0
        self.closed = 0
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True

    @asynccontextmanager
    async def render(self, url: str, timeout_ms: int):
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            entry = self.pages.get(url)
            if entry is None:
                entry = FakePage(url, status=404)
            if isinstance(entry, type) and issubclass(entry, BaseException):
                raise entry("boom")
            if isinstance(entry, BaseException):
                raise entry
            self.opened += 1
            try:
                yield entry
            finally:
                self.closed += 1
        finally:
            self.in_flight -= 1


def content_page(url: str, text: str = RELEVANT_TEXT, links: Iterable[str] = (),
                 title: str = "", selector: str = "main") -> FakePage:
    """Страница, у которой текст лежит под одним селектором."""
    return FakePage(url, title=title, texts={selector: text}, links=links)


@pytest.fixture()
def crawl_config() -> CrawlerConfig:
    """
    Конфигурация для тестов: без задержек между попытками и с коротким таймаутом.
    """
    return CrawlerConfig(
        renderer="http",
        max_depth=2,
        max_pages_per_domain=50,
        concurrent_pages=3,
        request_timeout_ms=2000,
        retry_attempts=3,
        retry_delay_ms=0,
    )
