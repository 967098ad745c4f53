# File: uni_scout/engine.py
"""uni_scout.engine: Orchestration layer: один полный обход домена и доставка результатов."""

from __future__ import annotations

from typing import Any, Optional

from uni_scout.config import CrawlerConfig, CrawlRequest
from uni_scout.crawler.models import CrawlReport
from uni_scout.crawler.scheduler import CrawlScheduler
from uni_scout.delivery import ResultSink
from uni_scout.errors import CrawlError, DeliveryFailure
from uni_scout.logger import logger
from uni_scout.render import create_renderer

__all__ = ["run_domain"]


async def run_domain(
    request: CrawlRequest,
    config: CrawlerConfig,
    sink: Optional[ResultSink] = None,
    renderer: Optional[Any] = None,
) -> CrawlReport:
    """
    Обходит домен из request и передаёт собранные записи в sink.

    Parameters
    ----------
    request : CrawlRequest
        Домен и стартовые URL.
    config : CrawlerConfig
        Параметры обхода.
    sink : ResultSink, optional
        Получатель результатов; записи отправляются одним пакетом, если они есть.
    renderer : optional
        Готовый renderer (async context manager); по умолчанию создаётся по config.renderer.

    Ошибка доставки только логируется и сохраняется в report.delivery_error.
    Если сам обход упал (например, не запустился браузер), в sink уходит
    конверт ошибки, а исключение пробрасывается дальше.
    """
    domain = request.domain
    logger.info("Starting scrape for domain: %s", domain)
    try:
        if domain in config.excluded_domains:
            raise CrawlError(f"Domain {domain} is in the excluded list")
        async with (renderer if renderer is not None else create_renderer(config)) as active:
            scheduler = CrawlScheduler(config, active, domain)
            report = await scheduler.run(request.seed_urls)
    except Exception as exc:
        logger.error("Scraping process failed for %s: %s", domain, exc)
        if sink is not None:
            try:
                await sink.deliver_error(domain, f"Scraping process failed: {exc}")
            except DeliveryFailure as delivery_exc:
                logger.error("Failed to post error report for domain %s: %s", domain, delivery_exc)
        raise

    if sink is not None and report.records:
        try:
            await sink.deliver(report)
        except DeliveryFailure as exc:
            logger.error("Failed to deliver results for %s: %s", domain, exc)
            report.delivery_error = str(exc)

    logger.info("Scraping and delivery complete for %s.", domain)
    return report
