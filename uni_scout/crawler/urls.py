# uni_scout/crawler/urls.py
"""
URL normalization and link resolution utilities for UniScout.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from uni_scout.errors import InvalidUrl

__all__ = ("normalize_url", "resolve_link", "same_host", "hostname")

TRACKING_PREFIX = "utm_"


def _strip_tracking(query: str, prefix: str) -> str:
    """Drop `prefix*` parameters; kept segments stay byte-for-byte."""
    if not query:
        return ""
    kept = [seg for seg in query.split("&") if seg and not seg.split("=", 1)[0].startswith(prefix)]
    return "&".join(kept)


def normalize_url(url: str, base: Optional[str] = None, tracking_prefix: str = TRACKING_PREFIX) -> str:
    """
    Canonicalize *url* for dedup: resolve against *base*, drop tracking
    query parameters and the fragment, lowercase scheme and host.

    Never raises; on a parse failure the original string is returned.
    """
    try:
        absolute = urljoin(base, url) if base else url
        parts = urlsplit(absolute)
        # accessing .port validates the netloc (e.g. non-numeric ports)
        parts.port
        query = _strip_tracking(parts.query, tracking_prefix)
        userinfo, at, hostport = parts.netloc.rpartition("@")
        netloc = userinfo + at + hostport.lower()
        path = parts.path
        if not path and parts.scheme in ("http", "https"):
            path = "/"
        return urlunsplit((parts.scheme.lower(), netloc, path, query, ""))
    except ValueError:
        return url


def resolve_link(href: str, base: str, tracking_prefix: str = TRACKING_PREFIX) -> str:
    """
    Resolve a harvested href into a normalized absolute http(s) URL.

    Raises InvalidUrl when the result is not a usable web address, so that
    callers can drop that single link.
    """
    raw = (href or "").strip()
    if not raw or raw.startswith(("mailto:", "javascript:", "tel:", "data:")):
        raise InvalidUrl(f"unsupported link: {href!r}", url=href)
    try:
        parts = urlsplit(urljoin(base, raw))
        parts.port
    except ValueError as exc:
        raise InvalidUrl(f"cannot resolve {href!r}: {exc}", url=href) from exc
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidUrl(f"not an absolute http(s) URL: {href!r}", url=href)
    return normalize_url(urlunsplit(parts), tracking_prefix=tracking_prefix)


def hostname(url: str) -> str:
    """Return the lowercase host of *url* or an empty string."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def same_host(url: str, domain: str) -> bool:
    """True if *url* points at exactly *domain*."""
    return hostname(url) == domain.lower()
