from relatedposts.pipeline_types import ContentItem, RankMode
from relatedposts.scoring import (
    category_score,
    mixed_score,
    points_score,
    score,
    shared_tags,
    tag_score,
)


def _item(item_id, category, tags):
    return ContentItem(item_id=item_id, category=category, tags=tags)


def test_tag_score_normalises_by_larger_set():
    a = _item("a", "web", {"react", "javascript"})
    b = _item("b", "web", {"react", "hooks", "state", "redux"})
    # one shared tag out of max(2, 4)
    assert tag_score(a, b) == 0.25
    assert tag_score(b, a) == 0.25


def test_tag_score_zero_when_either_side_untagged():
    a = _item("a", "web", set())
    b = _item("b", "web", {"react"})
    assert tag_score(a, b) == 0.0
    assert tag_score(b, a) == 0.0


def test_category_score_is_flat_bonus():
    a = _item("a", "web", {"x"})
    assert category_score(a, _item("b", "web", {"y"})) == 0.5
    assert category_score(a, _item("c", "mobile", {"x"})) == 0.0


def test_equal_empty_categories_match():
    a = _item("a", "", {"x"})
    b = _item("b", "", {"y"})
    assert category_score(a, b) == 0.5
    assert points_score(a, b) == 5.0
    assert category_score(a, _item("c", "web", {"y"})) == 0.0


def test_mixed_score_takes_stronger_signal():
    ref = _item("r", "web", {"react", "javascript"})
    both = _item("a", "web", {"react", "javascript"})
    partial = _item("b", "web", {"react", "hooks", "css"})
    assert mixed_score(ref, both) == 1.0
    # tag 1/3 < category bonus
    assert mixed_score(ref, partial) == 0.5


def test_points_score_counts_category_and_tags():
    ref = _item("r", "web", {"javascript", "react", "frontend"})
    cand = _item("c", "web", {"react", "javascript", "nextjs"})
    assert points_score(ref, cand) == 7.0
    assert points_score(ref, _item("d", "devops", {"docker"})) == 0.0


def test_score_dispatches_on_mode():
    ref = _item("r", "web", {"react"})
    cand = _item("c", "web", {"react", "hooks"})
    assert score(ref, cand, RankMode.TAG) == 0.5
    assert score(ref, cand, RankMode.CATEGORY) == 0.5
    assert score(ref, cand, RankMode.MIXED) == 0.5
    assert shared_tags(ref, cand) == frozenset({"react"})
