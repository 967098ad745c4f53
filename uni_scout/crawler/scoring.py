# uni_scout/crawler/scoring.py
"""
Keyword and path heuristics: relevance verdict, stored content score and the
frontier priority score.
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple
from urllib.parse import urlsplit

from uni_scout.config import DEFAULT_HIGH_PRIORITY_KEYWORDS, DEFAULT_RELEVANT_KEYWORDS

__all__ = ("RelevanceScorer", "PATH_WEIGHTS")

#: (path substrings, weight); a group adds its weight once if any substring matches.
PATH_WEIGHTS: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("admission", "apply"), 100),
    (("program", "degree", "major"), 90),
    (("academic",), 80),
    (("department", "school", "college"), 75),
    (("faculty",), 70),
    (("international",), 65),
    (("tuition", "fees", "scholarship"), 60),
    (("research",), 50),
    (("undergraduate",), 20),
    (("graduate",), 20),
)

KEYWORD_URL_BONUS = 2
HIGH_PRIORITY_BONUS = 5
PATH_SECTION_BONUS = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RelevanceScorer:
    """Pure, case-insensitive scoring functions bound to keyword lists."""

    def __init__(
        self,
        max_depth: int,
        relevant_keywords: Iterable[str] = DEFAULT_RELEVANT_KEYWORDS,
        high_priority_keywords: Iterable[str] = DEFAULT_HIGH_PRIORITY_KEYWORDS,
    ) -> None:
        self.max_depth = max_depth
        self.relevant_keywords: Sequence[str] = tuple(k.lower() for k in relevant_keywords)
        self.high_priority_keywords: Sequence[str] = tuple(k.lower() for k in high_priority_keywords)

    def is_relevant(self, title: str, path: str, content: str = "") -> bool:
        text = f"{title} {path} {content}".lower()
        return any(kw in text for kw in self.relevant_keywords)

    def content_score(self, title: str, path: str, content: str) -> int:
        """Score stored with an accepted page; never used for crawl ordering."""
        text = f"{title} {path} {content}".lower()
        score = sum(HIGH_PRIORITY_BONUS for kw in self.high_priority_keywords if kw in text)
        score += sum(1 for kw in self.relevant_keywords if kw in text)
        lowered = path.lower()
        if "/admission" in lowered:
            score += PATH_SECTION_BONUS
        if "/program" in lowered:
            score += PATH_SECTION_BONUS
        return score

    def depth_factor(self, depth: int) -> float:
        """Linear decay ``1 - depth/(max_depth+1)``, never negative."""
        return max(0.0, 1 - depth / (self.max_depth + 1))

    def priority_score(self, url: str, depth: int) -> int:
        """Frontier ordering score for *url* discovered at *depth*."""
        url_text = url.lower()
        try:
            path = urlsplit(url).path.lower()
        except ValueError:
            path = ""
        raw = 0
        for needles, weight in PATH_WEIGHTS:
            if any(n in path for n in needles):
                raw += weight
        raw += sum(KEYWORD_URL_BONUS for kw in self.relevant_keywords if kw in url_text)
        return _round_half_up(raw * self.depth_factor(depth))
