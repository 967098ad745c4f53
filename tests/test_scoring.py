# File: tests/test_scoring.py
import pytest

from uni_scout.crawler.scoring import RelevanceScorer


@pytest.fixture()
def scorer() -> RelevanceScorer:
    return RelevanceScorer(max_depth=1)


def test_priority_score_worked_example(scorer):
    # 100 за admission + 2 за "admission" и 2 за "admissions" в URL
    assert scorer.priority_score("https://example.edu/admissions", 0) == 104
    assert scorer.priority_score("https://example.edu/admissions", 1) == 52
    assert scorer.priority_score("https://example.edu/admissions", 2) == 0


def test_priority_score_rounds_half_up(scorer):
    # 75 (college) + 2 (keyword) = 77; 77 * 0.5 = 38.5
    assert scorer.priority_score("https://example.edu/college", 1) == 39


def test_path_group_counts_once():
    scorer = RelevanceScorer(max_depth=4)
    # program/degree/major -> 90 один раз; program, programs, degree -> 6
    assert scorer.priority_score("https://example.edu/programs/degree", 0) == 96


def test_priority_score_non_increasing_in_depth():
    scorer = RelevanceScorer(max_depth=4)
    url = "https://example.edu/academics/departments/engineering"
    scores = [scorer.priority_score(url, d) for d in range(7)]
    assert scores == sorted(scores, reverse=True)
    assert scores[-1] == 0
    assert all(s >= 0 for s in scores)


def test_irrelevant_url_scores_zero(scorer):
    assert scorer.priority_score("https://example.edu/contact-us", 0) == 0


def test_is_relevant_is_case_insensitive(scorer):
    assert scorer.is_relevant("Department of Physics", "/x", "")
    assert scorer.is_relevant("", "/ADMISSIONS", "")
    assert scorer.is_relevant("", "/x", "Our COMPUTER labs")
    assert not scorer.is_relevant("Weather", "/weather", "Sunny all week")


def test_content_score(scorer):
    title = "Admissions"
    path = "/admissions/apply"
    content = "Learn about our undergraduate programs."
    # 6 приоритетных слов * 5 + 7 общих слов + 10 за /admission
    assert scorer.content_score(title, path, content) == 47


def test_content_score_path_sections(scorer):
    assert scorer.content_score("", "/programs", "") - scorer.content_score("", "/xprograms", "") == 10


def test_custom_keywords():
    scorer = RelevanceScorer(max_depth=0, relevant_keywords=["Tuition"], high_priority_keywords=[])
    assert scorer.is_relevant("", "/", "tuition and fees")
    assert not scorer.is_relevant("", "/", "admissions")
