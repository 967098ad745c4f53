# File: tests/test_browser_renderer.py
# BrowserRenderer на заглушках Playwright: перехват ресурсов и закрытие вкладок.
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from uni_scout.errors import NavigationTimeout
from uni_scout.render.browser import BrowserPage, BrowserRenderer


class StubRequest:
    def __init__(self, resource_type: str):
        self.resource_type = resource_type


class StubRoute:
    def __init__(self, resource_type: str):
        self.request = StubRequest(resource_type)
        self.actions: List[str] = []

    async def abort(self):
        self.actions.append("abort")

    async def continue_(self):
        self.actions.append("continue")


class StubResponse:
    def __init__(self, status: int = 200, headers: Optional[Dict[str, str]] = None):
        self.status = status
        self.headers = dict(headers or {})


class StubHandle:
    def __init__(self, text: str):
        self._text = text

    async def inner_text(self) -> str:
        return self._text


class StubPage:
    def __init__(self, goto_result: Any = None, texts: Optional[Dict[str, str]] = None, hrefs=()):
        self.url = "about:blank"
        self.goto_result = goto_result
        self.texts = dict(texts or {})
        self.hrefs = list(hrefs)
        self.goto_calls: List[Dict[str, Any]] = []
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if isinstance(self.goto_result, BaseException):
            raise self.goto_result
        self.url = url
        return self.goto_result

    async def title(self) -> str:
        return "Admissions"

    async def query_selector(self, selector):
        text = self.texts.get(selector)
        return StubHandle(text) if text is not None else None

    async def eval_on_selector_all(self, selector, script):
        return list(self.hrefs)

    async def close(self):
        self.closed = True


class StubContext:
    def __init__(self, page: StubPage):
        self.page = page

    async def new_page(self) -> StubPage:
        return self.page


def renderer_with(crawl_config, page: StubPage) -> BrowserRenderer:
    renderer = BrowserRenderer(crawl_config)
    renderer._context = StubContext(page)
    return renderer


@pytest.mark.asyncio()
@pytest.mark.parametrize("resource_type", ["image", "stylesheet", "font", "media"])
async def test_heavy_resources_are_aborted(crawl_config, resource_type):
    route = StubRoute(resource_type)
    await BrowserRenderer(crawl_config)._route_handler(route)
    assert route.actions == ["abort"]


@pytest.mark.asyncio()
@pytest.mark.parametrize("resource_type", ["document", "script", "xhr", "fetch"])
async def test_other_requests_continue(crawl_config, resource_type):
    route = StubRoute(resource_type)
    await BrowserRenderer(crawl_config)._route_handler(route)
    assert route.actions == ["continue"]


@pytest.mark.asyncio()
async def test_blocked_types_follow_config(crawl_config):
    config = crawl_config.model_copy(update={"blocked_resource_types": ("font",)})
    renderer = BrowserRenderer(config)
    image, font = StubRoute("image"), StubRoute("font")
    await renderer._route_handler(image)
    await renderer._route_handler(font)
    assert image.actions == ["continue"]
    assert font.actions == ["abort"]


@pytest.mark.asyncio()
async def test_navigation_timeout_closes_page(crawl_config):
    page = StubPage(goto_result=PlaywrightTimeout("Timeout 1000ms exceeded"))
    renderer = renderer_with(crawl_config, page)
    with pytest.raises(NavigationTimeout):
        async with renderer.render("https://example.edu/", 1000):
            pass
    assert page.closed
    assert page.goto_calls == [
        {"url": "https://example.edu/", "wait_until": "domcontentloaded", "timeout": 1000}
    ]


@pytest.mark.asyncio()
async def test_navigation_error_closes_page(crawl_config):
    page = StubPage(goto_result=RuntimeError("net::ERR_CONNECTION_RESET"))
    renderer = renderer_with(crawl_config, page)
    with pytest.raises(RuntimeError):
        async with renderer.render("https://example.edu/", 1000):
            pass
    assert page.closed


@pytest.mark.asyncio()
async def test_error_while_reading_closes_page(crawl_config):
    page = StubPage(goto_result=StubResponse())
    renderer = renderer_with(crawl_config, page)
    with pytest.raises(ValueError):
        async with renderer.render("https://example.edu/", 1000):
            assert not page.closed
            raise ValueError("selector failed")
    assert page.closed


@pytest.mark.asyncio()
async def test_rendered_page_exposes_status_text_and_links(crawl_config):
    page = StubPage(
        goto_result=StubResponse(301, {"location": "/apply"}),
        texts={"main": "Apply today"},
        hrefs=["https://example.edu/apply"],
    )
    renderer = renderer_with(crawl_config, page)
    async with renderer.render("https://example.edu/old", 1000) as rendered:
        assert isinstance(rendered, BrowserPage)
        assert rendered.final_url == "https://example.edu/old"
        assert rendered.status == 301
        assert rendered.redirect_location == "/apply"
        assert rendered.title == "Admissions"
        assert await rendered.text("main") == "Apply today"
        assert await rendered.text("article") is None
        assert await rendered.links() == ["https://example.edu/apply"]
    assert page.closed


@pytest.mark.asyncio()
async def test_missing_response_counts_as_ok(crawl_config):
    page = StubPage(goto_result=None)
    async with renderer_with(crawl_config, page).render("https://example.edu/", 1000) as rendered:
        assert rendered.status == 200
        assert rendered.redirect_location is None


@pytest.mark.asyncio()
async def test_render_requires_started_session(crawl_config):
    with pytest.raises(RuntimeError):
        async with BrowserRenderer(crawl_config).render("https://example.edu/", 1000):
            pass
