# uni_scout/__init__.py
"""
UniScout package initializer.
Defines package version and exposes the crawl entry point.
"""
__version__ = "0.1.0"

from uni_scout.config import CrawlerConfig, CrawlRequest, load_config  # noqa: E402
from uni_scout.engine import run_domain  # noqa: E402

__all__ = ["__version__", "CrawlerConfig", "CrawlRequest", "load_config", "run_domain"]
