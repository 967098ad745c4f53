# File: uni_scout/server.py
"""uni_scout.server: HTTP-фронтенд — принимает задания на обход и выполняет их в фоне.

    POST /scrape  {"domain", "seedUrls", "workerWebhookUrl"} -> 202, результаты уходят на webhook
    GET  /        проверка работоспособности
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from aiohttp import web
from pydantic import ValidationError

from uni_scout.config import CrawlerConfig, CrawlRequest
from uni_scout.delivery import WebhookSink
from uni_scout.engine import run_domain
from uni_scout.logger import logger

__all__ = ["create_app", "serve"]

DomainRunner = Callable[..., Awaitable[Any]]

CONFIG_KEY = web.AppKey("config", CrawlerConfig)
RUNNER_KEY = web.AppKey("runner", object)
TASKS_KEY = web.AppKey("tasks", set)

_MISSING_PARAMS = (
    'Missing parameters. "domain", "seedUrls" (array), and "workerWebhookUrl" are required.'
)


async def health(_: web.Request) -> web.Response:
    return web.Response(text="Scraper API is running. Use POST /scrape to start a job.")


async def scrape(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": "Request body must be JSON."}, status=400)
    if (
        not isinstance(body, dict)
        or not body.get("domain")
        or not isinstance(body.get("seedUrls"), list)
        or not body.get("workerWebhookUrl")
    ):
        return web.json_response({"error": _MISSING_PARAMS}, status=400)
    try:
        crawl_request = CrawlRequest.model_validate(body)
    except ValidationError as exc:
        return web.json_response({"error": exc.errors(include_url=False, include_context=False)}, status=400)

    app = request.app
    task = asyncio.create_task(_background(app, crawl_request), name=f"crawl:{crawl_request.domain}")
    tasks: Set[asyncio.Task[Any]] = app[TASKS_KEY]
    tasks.add(task)
    task.add_done_callback(tasks.discard)

    return web.json_response(
        {
            "message": "Scraping request accepted and is running in the background.",
            "domain": crawl_request.domain,
        },
        status=202,
    )


async def _background(app: web.Application, crawl_request: CrawlRequest) -> None:
    runner: DomainRunner = app[RUNNER_KEY]  # type: ignore[assignment]
    sink = WebhookSink(crawl_request.webhook_url or "")
    logger.info("BACKGROUND: Starting scrape for domain: %s", crawl_request.domain)
    try:
        await runner(crawl_request, app[CONFIG_KEY], sink)
    except Exception as exc:
        logger.error("BACKGROUND scraping failed for %s: %s", crawl_request.domain, exc)
        return
    logger.info("BACKGROUND: Finished scrape for domain: %s", crawl_request.domain)


async def _cancel_background(app: web.Application) -> None:
    tasks = list(app[TASKS_KEY])
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)


def create_app(config: CrawlerConfig, runner: Optional[DomainRunner] = None) -> web.Application:
    """Создаёт aiohttp-приложение; runner подменяется в тестах."""
    app = web.Application()
    app[CONFIG_KEY] = config
    app[RUNNER_KEY] = runner or run_domain
    app[TASKS_KEY] = set()
    app.router.add_get("/", health)
    app.router.add_post("/scrape", scrape)
    app.on_cleanup.append(_cancel_background)
    return app


def serve(config: CrawlerConfig, host: str = "0.0.0.0", port: int = 10000) -> None:
    logger.info("Server listening on port %d", port)
    web.run_app(create_app(config), host=host, port=port, print=None)
