# File: uni_scout/errors.py
"""uni_scout.errors: Иерархия ошибок обхода домена.

Ошибки одной страницы превращаются в значения-исходы (см. crawler.models.Failed)
и никогда не прерывают обход целиком.
"""

from __future__ import annotations

__all__ = [
    "CrawlError",
    "NavigationTimeout",
    "HttpFailureStatus",
    "NoUsableContent",
    "InvalidUrl",
    "RetryBudgetExhausted",
    "DeliveryFailure",
]


class CrawlError(Exception):
    """Базовая ошибка краулера."""

    retryable: bool = False

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NavigationTimeout(CrawlError):
    """Страница не загрузилась за отведённое время."""

    retryable = True


class HttpFailureStatus(CrawlError):
    """Ответ с неуспешным HTTP-статусом (не 2xx/304 и не редирект)."""

    retryable = True

    def __init__(self, status: int, *, url: str | None = None) -> None:
        super().__init__(f"Failed to load page with status: {status}", url=url)
        self.status = status


class NoUsableContent(CrawlError):
    """Ни один из селекторов не дал текста длиннее порога."""


class InvalidUrl(CrawlError):
    """Ссылку не удалось превратить в абсолютный http(s) URL."""


class RetryBudgetExhausted(CrawlError):
    """Исчерпан лимит попыток для пары (url, depth)."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"Max retry attempts reached ({attempts})", url=url)
        self.attempts = attempts


class DeliveryFailure(CrawlError):
    """Получатель результатов недоступен или ответил ошибкой."""
