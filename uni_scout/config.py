# === FILE: uni_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера UniScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Optional, Tuple, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

__all__ = [
    "ExclusionConfig",
    "CrawlerConfig",
    "CrawlRequest",
    "load_config",
    "DEFAULT_RELEVANT_KEYWORDS",
    "DEFAULT_HIGH_PRIORITY_KEYWORDS",
]


DEFAULT_RELEVANT_KEYWORDS: Tuple[str, ...] = (
    "undergraduate", "graduate", "program", "programs", "department", "departments",
    "school", "college", "admission", "admissions", "apply", "applications",
    "academic", "academics", "faculty", "faculties", "course", "courses",
    "curriculum", "curricula", "degree", "degrees", "major", "minor",
    "engineering", "computer", "science", "medicine", "business", "law", "education",
)

DEFAULT_HIGH_PRIORITY_KEYWORDS: Tuple[str, ...] = (
    "program", "programs", "department", "departments", "admission", "admissions",
    "academics", "academic", "faculty", "degree", "undergraduate", "graduate",
)

# Группы селекторов: от самых специфичных к самым общим.
DEFAULT_SELECTOR_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("main", "article", ".main-content", "#content", "div.content"),
    (".container", "div.page-content", "#main-container"),
    ("body",),
)


class ExclusionConfig(BaseModel):
    """Статическая политика отсева путей."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    extensions: Tuple[str, ...] = Field(
        ("pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "zip", "jpg", "jpeg", "png", "gif", "svg"),
        description="Расширения бинарных файлов и документов.",
    )
    dated_sections: Tuple[str, ...] = Field(
        ("news", "events", "calendar"),
        description="Разделы с архивами по датам (/news/2024/05/...).",
    )
    generic_patterns: Tuple[str, ...] = Field(
        (r"/blog/", r"/tag/", r"/category/", r"/author/", r"/feed/", r"/rss/", r"/sitemap/", r"/wp-"),
        description="Регулярные выражения малоценных разделов.",
    )
    listing_sections: Tuple[str, ...] = Field(
        ("blog", "news", "events", "category", "tag"),
        description="Разделы-списки, где отсекаются параметры пагинации/поиска.",
    )
    listing_params: Tuple[str, ...] = Field(
        ("page", "p", "search"),
        description="Параметры пагинации и поиска.",
    )
    aggressive: bool = Field(False, description="Включить строгий уровень отсева.")
    aggressive_paths: Tuple[str, ...] = Field(
        (
            "/research/", "/course-catalog/", "/directory/", "/people/", "/gallery/",
            "/events/", "/calendar/", "/news/", "/blog/", "/about/history",
            "/archive/", "/alumni/",
        ),
        description="Строгий список каталогов.",
    )


class CrawlerConfig(BaseModel):
    """Конфигурация одного обхода домена."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(4, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages_per_domain: int = Field(300, ge=1, description="Жесткий лимит числа страниц на домен.")
    concurrent_pages: int = Field(3, ge=1, description="Число одновременно загружаемых страниц.")
    request_timeout_ms: int = Field(45000, gt=0, description="Таймаут загрузки одной страницы (мс).")
    retry_attempts: int = Field(5, ge=1, description="Сколько раз можно запрашивать одну пару (url, depth).")
    retry_delay_ms: int = Field(3000, ge=0, description="Базовая задержка перед повтором (мс), растёт линейно.")
    min_score_to_enqueue: int = Field(1, description="Минимальный приоритет для постановки ссылки в очередь.")
    max_links_per_page: Optional[int] = Field(25, ge=1, description="Сколько лучших ссылок со страницы брать.")
    seed_score: int = Field(1000, description="Приоритет стартовых URL.")
    content_min_length: int = Field(250, ge=0, description="Минимальная длина извлечённого текста.")
    content_max_length: int = Field(2000, ge=1, description="Обрезка текста в PageRecord.")
    tracking_prefix: str = Field("utm_", min_length=1, description="Префикс трекинговых параметров.")

    relevant_keywords: Tuple[str, ...] = DEFAULT_RELEVANT_KEYWORDS
    high_priority_keywords: Tuple[str, ...] = DEFAULT_HIGH_PRIORITY_KEYWORDS
    exclusion: ExclusionConfig = Field(default_factory=ExclusionConfig)
    excluded_domains: Tuple[str, ...] = Field(
        ("www.nyu.edu",), description="Домены с защитой от ботов, которые не обходим."
    )

    renderer: Literal["browser", "http"] = Field("browser", description="Способ загрузки страниц.")
    headless: bool = True
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        min_length=1,
        description="Заголовок User-Agent.",
    )
    blocked_resource_types: Tuple[str, ...] = ("image", "stylesheet", "font", "media")
    selector_groups: Tuple[Tuple[str, ...], ...] = DEFAULT_SELECTOR_GROUPS

    @field_validator("relevant_keywords", "high_priority_keywords", mode="after")
    def _lowercase_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(k.lower() for k in v if k)

    @field_validator("selector_groups", mode="after")
    def _non_empty_groups(cls, v: Tuple[Tuple[str, ...], ...]) -> Tuple[Tuple[str, ...], ...]:
        groups = tuple(g for g in v if g)
        if not groups:
            raise ValueError("selector_groups must contain at least one selector")
        return groups

    @property
    def request_timeout(self) -> float:
        """Таймаут в секундах для asyncio."""
        return self.request_timeout_ms / 1000


class CrawlRequest(BaseModel):
    """Задание на обход: домен, стартовые URL и (опционально) webhook."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    domain: str = Field(..., min_length=1)
    seed_urls: List[str] = Field(
        ..., min_length=1, validation_alias=AliasChoices("seed_urls", "seedUrls")
    )
    webhook_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("webhook_url", "workerWebhookUrl")
    )

    @field_validator("domain", mode="before")
    def _strip_domain(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _check_seeds_on_domain(self) -> CrawlRequest:
        for seed in self.seed_urls:
            parts = urlsplit(seed)
            if parts.scheme not in ("http", "https") or not parts.hostname:
                raise ValueError(f"seed URL must be absolute http(s): {seed}")
            if parts.hostname != self.domain:
                raise ValueError(f"seed URL {seed} is not on domain {self.domain}")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.

    Без явного пути берётся configs/default.yaml, а если его нет —
    встроенные значения по умолчанию. Явно указанный, но отсутствующий
    файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise
