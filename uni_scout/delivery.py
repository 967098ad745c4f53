# File: uni_scout/delivery.py
"""uni_scout.delivery: Доставка результатов обхода — webhook или файл."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, Protocol, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

from uni_scout.crawler.models import CrawlReport
from uni_scout.errors import DeliveryFailure
from uni_scout.logger import logger
from uni_scout.report.json_report import render_json

__all__ = ["ResultSink", "WebhookSink", "FileSink", "error_envelope"]


def error_envelope(domain: str, message: str) -> Dict[str, Any]:
    """Конверт ошибки для получателя: {error: true, domain, message}."""
    return {"error": True, "domain": domain, "message": message}


class ResultSink(Protocol):
    async def deliver(self, report: CrawlReport) -> None:
        ...

    async def deliver_error(self, domain: str, message: str) -> None:
        ...


class WebhookSink:
    """Отправляет пакет PageRecord (или конверт ошибки) POST-запросом на webhook."""

    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout

    async def deliver(self, report: CrawlReport) -> None:
        logger.info(
            "Posting %d results to worker webhook for domain %s", len(report.records), report.domain
        )
        await self._post(report.to_dicts())

    async def deliver_error(self, domain: str, message: str) -> None:
        await self._post(error_envelope(domain, message))

    async def _post(self, payload: Any) -> None:
        try:
            async with ClientSession(timeout=ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.url, json=payload) as resp:
                    if resp.status >= 400:
                        raise DeliveryFailure(f"webhook answered HTTP {resp.status}", url=self.url)
        except (ClientError, asyncio.TimeoutError) as exc:
            raise DeliveryFailure(f"webhook unreachable: {exc}", url=self.url) from exc


class FileSink:
    """Сохраняет пакет в JSON-файл (тот же формат, что и webhook)."""

    def __init__(self, path: Union[str, Path], pretty: bool = True) -> None:
        self.path = Path(path)
        self.pretty = pretty

    async def deliver(self, report: CrawlReport) -> None:
        try:
            render_json(report, self.path, pretty=self.pretty)
        except OSError as exc:
            raise DeliveryFailure(f"cannot write {self.path}: {exc}") from exc

    async def deliver_error(self, domain: str, message: str) -> None:
        try:
            render_json(error_envelope(domain, message), self.path, pretty=self.pretty)
        except OSError as exc:
            raise DeliveryFailure(f"cannot write {self.path}: {exc}") from exc
