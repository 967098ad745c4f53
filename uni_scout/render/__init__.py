# File: uni_scout/render/__init__.py
"""uni_scout.render: Реализации примитива загрузки страниц (браузер и HTTP)."""

from __future__ import annotations

from typing import Any

from uni_scout.config import CrawlerConfig
from uni_scout.render.base import RenderedPage, Renderer

__all__ = ["RenderedPage", "Renderer", "create_renderer"]


def create_renderer(config: CrawlerConfig) -> Any:
    """Возвращает renderer (async context manager) согласно config.renderer."""
    if config.renderer == "http":
        from uni_scout.render.http import HttpRenderer

        return HttpRenderer(config)
    from uni_scout.render.browser import BrowserRenderer

    return BrowserRenderer(config)
