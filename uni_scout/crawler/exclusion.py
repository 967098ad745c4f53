# uni_scout/crawler/exclusion.py
"""
Static exclusion policy: which paths and links are never worth fetching.
"""
from __future__ import annotations

import re
from typing import List, Pattern, Tuple
from urllib.parse import parse_qsl, urlsplit

from uni_scout.config import ExclusionConfig

__all__ = ("ExclusionFilter", "should_exclude")


class ExclusionFilter:
    """Stateless path/query predicate compiled from an :class:`ExclusionConfig`."""

    def __init__(self, config: ExclusionConfig | None = None) -> None:
        self.config = config or ExclusionConfig()
        cfg = self.config
        exts = "|".join(re.escape(e.lstrip(".")) for e in cfg.extensions)
        self._extension_re: Pattern[str] | None = (
            re.compile(rf"\.(?:{exts})$", re.IGNORECASE) if exts else None
        )
        self._dated_res: List[Pattern[str]] = [
            re.compile(rf"/{re.escape(s)}/\d{{4}}(?:/\d{{2}})?(?:/\d{{2}})?/", re.IGNORECASE)
            for s in cfg.dated_sections
        ]
        self._generic_res: List[Pattern[str]] = [
            re.compile(p, re.IGNORECASE) for p in cfg.generic_patterns
        ]
        self._listing_res: List[Pattern[str]] = [
            re.compile(rf"/{re.escape(s)}/", re.IGNORECASE) for s in cfg.listing_sections
        ]
        self._listing_params = frozenset(p.lower() for p in cfg.listing_params)
        self._aggressive: Tuple[str, ...] = tuple(p.lower() for p in cfg.aggressive_paths)

    def should_exclude(self, path: str, query: str = "") -> bool:
        """Return True if a page at *path* with *query* must never be fetched."""
        path = path or "/"
        if self._extension_re and self._extension_re.search(path):
            return True
        if any(r.search(path) for r in self._dated_res):
            return True
        if any(r.search(path) for r in self._generic_res):
            return True
        if self._is_paginated_listing(path, query or ""):
            return True
        if self.config.aggressive:
            lowered = path.lower()
            if any(p in lowered for p in self._aggressive):
                return True
        return False

    def excludes_url(self, url: str) -> bool:
        """Convenience wrapper splitting *url* into path and query."""
        try:
            parts = urlsplit(url)
        except ValueError:
            return True
        return self.should_exclude(parts.path, parts.query)

    def _is_paginated_listing(self, path: str, query: str) -> bool:
        if not query or not any(r.search(path) for r in self._listing_res):
            return False
        keys = {k.lower() for k, _ in parse_qsl(query.lstrip("?"), keep_blank_values=True)}
        return bool(keys & self._listing_params)


_DEFAULT_FILTER = ExclusionFilter()


def should_exclude(path: str, query: str = "") -> bool:
    """Default-policy predicate (aggressive tier disabled)."""
    return _DEFAULT_FILTER.should_exclude(path, query)
