# File: tests/test_exclusion.py
import pytest

from uni_scout.config import ExclusionConfig
from uni_scout.crawler.exclusion import ExclusionFilter, should_exclude


@pytest.mark.parametrize(
    "path,query,excluded",
    [
        ("/files/report.pdf", "", True),
        ("/files/Report.PDF", "", True),
        ("/img/campus.jpeg", "", True),
        ("/news/2024/05/new-dean", "", True),
        ("/events/2023/", "", True),
        ("/blog/post-1", "", True),
        ("/tag/admissions", "", True),
        ("/wp-content/uploads/x", "", True),
        ("/events/", "page=2", True),
        ("/news/", "search=dean", True),
        ("/news/", "", False),
        ("/programs/", "page=2", False),
        ("/admissions", "", False),
        ("/academics/degrees", "", False),
        ("/", "", False),
    ],
)
def test_default_policy(path, query, excluded):
    assert should_exclude(path, query) is excluded


def test_aggressive_tier_is_opt_in():
    assert should_exclude("/research/labs") is False
    strict = ExclusionFilter(ExclusionConfig(aggressive=True))
    assert strict.should_exclude("/research/labs") is True
    assert strict.should_exclude("/alumni/") is True
    assert strict.should_exclude("/admissions") is False


def test_excludes_url_splits_path_and_query():
    flt = ExclusionFilter()
    assert flt.excludes_url("https://example.edu/blog/2024/post-1")
    assert flt.excludes_url("https://example.edu/events/?page=3")
    assert not flt.excludes_url("https://example.edu/programs/?page=3")


def test_custom_extensions():
    flt = ExclusionFilter(ExclusionConfig(extensions=("ics",)))
    assert flt.should_exclude("/calendar/feed.ics")
    assert not flt.should_exclude("/files/report.pdf")
