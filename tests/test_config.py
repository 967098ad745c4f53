# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from uni_scout.config import (
    DEFAULT_SELECTOR_GROUPS,
    CrawlerConfig,
    CrawlRequest,
    load_config,
)

REPO_DEFAULT = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("max_depth: 2\nconcurrent_pages: 5", ".yaml", None),
        (json.dumps({"max_depth": 2, "concurrent_pages": 5}), ".json", None),
        ("max_depth: -1", ".yaml", ValidationError),
        ("unknown_option: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("{broken json", ".json", ValueError),
        ("max_depth = 2", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerConfig)
        assert cfg.max_depth == 2
        assert cfg.concurrent_pages == 5


def test_load_config_default_missing_falls_back(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config(None) == CrawlerConfig()


def test_load_config_explicit_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_shipped_default_matches_builtin():
    cfg = load_config(REPO_DEFAULT)
    builtin = CrawlerConfig()
    assert cfg.max_depth == builtin.max_depth == 4
    assert cfg.max_pages_per_domain == 300
    assert cfg.concurrent_pages == 3
    assert cfg.request_timeout == 45.0
    assert cfg.selector_groups == DEFAULT_SELECTOR_GROUPS
    assert cfg.excluded_domains == ("www.nyu.edu",)
    assert cfg.exclusion.aggressive is False


def test_keywords_are_lowercased():
    cfg = CrawlerConfig(relevant_keywords=["Tuition", "FEES"])
    assert cfg.relevant_keywords == ("tuition", "fees")


def test_empty_selector_groups_rejected():
    with pytest.raises(ValidationError):
        CrawlerConfig(selector_groups=[[]])


def test_config_is_frozen():
    cfg = CrawlerConfig()
    with pytest.raises(ValidationError):
        cfg.max_depth = 1


def test_crawl_request_accepts_wire_names():
    req = CrawlRequest.model_validate(
        {
            "domain": " Example.EDU ",
            "seedUrls": ["https://example.edu/admissions"],
            "workerWebhookUrl": "http://worker/hook",
        }
    )
    assert req.domain == "example.edu"
    assert req.seed_urls == ["https://example.edu/admissions"]
    assert req.webhook_url == "http://worker/hook"


@pytest.mark.parametrize(
    "seeds",
    [[], ["https://other.edu/"], ["/relative/path"], ["ftp://example.edu/"]],
)
def test_crawl_request_rejects_bad_seeds(seeds):
    with pytest.raises(ValidationError):
        CrawlRequest(domain="example.edu", seed_urls=seeds)
