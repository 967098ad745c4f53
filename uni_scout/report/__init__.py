# File: uni_scout/report/__init__.py
"""uni_scout.report: Генерация отчётов (JSON и HTML) по результатам обхода."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json

__all__ = ["render_json", "render_html"]
