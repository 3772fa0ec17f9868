from datetime import datetime, timedelta, timezone

import pytest

from relatedposts.errors import InvalidArgument
from relatedposts.pipeline_types import ContentItem, RankMode
from relatedposts.ranker import rank, rank_by_points

BASE = datetime(2023, 6, 1, tzinfo=timezone.utc)


def _item(item_id, category, tags, days=0):
    return ContentItem(
        item_id=item_id,
        category=category,
        tags=tags,
        published_at=BASE + timedelta(days=days),
    )


def _pool():
    return [
        _item("p1", "web", {"react", "javascript"}, days=0),
        _item("p2", "web", {"react", "hooks"}, days=1),
        _item("p3", "web", {"css"}, days=2),
        _item("p4", "mobile", {"react", "javascript"}, days=3),
        _item("p5", "devops", {"docker"}, days=4),
        _item("p6", "mobile", {"javascript", "swift", "ios"}, days=5),
    ]


def test_worked_example_mixed_mode():
    ref = _item("ref", "web", {"react", "javascript"})
    a = _item("A", "web", {"react", "hooks"}, days=2)
    b = _item("B", "web", {"css"}, days=1)
    c = _item("C", "mobile", {"react", "javascript"}, days=0)

    result = rank(ref, [a, b, c], limit=2, mode="mixed")

    assert result.ids() == ["C", "A"]
    assert [s.score for s in result] == [1.0, 0.5]


def test_worked_example_tie_falls_back_to_id():
    ref = _item("ref", "web", {"react", "javascript"})
    a = _item("A", "web", {"react", "hooks"})
    b = _item("B", "web", {"css"})

    result = rank(ref, [b, a], limit=5, mode=RankMode.MIXED)

    # equal score and timestamp -> lexicographic id
    assert result.ids() == ["A", "B"]


def test_result_respects_limit_and_excludes_reference():
    pool = _pool()
    ref = pool[0]
    for limit in (1, 2, 3, 10):
        result = rank(ref, pool, limit=limit)
        assert len(result) <= limit
        assert ref.item_id not in result.ids()
        assert result.reference_id == "p1"


def test_scores_are_non_increasing():
    pool = _pool()
    result = rank(pool[0], pool, limit=10)
    scores = [s.score for s in result]
    assert scores == sorted(scores, reverse=True)
    assert all(s > 0 for s in scores)


def test_rank_is_deterministic():
    pool = _pool()
    first = rank(pool[0], pool, limit=4, mode="mixed")
    second = rank(pool[0], list(reversed(pool)), limit=4, mode="mixed")
    assert first == second


def test_tag_mode_only_returns_shared_tags():
    pool = _pool()
    ref = pool[0]
    result = rank(ref, pool, limit=10, mode="tag")
    assert result.ids() == ["p4", "p2", "p6"]
    for scored in result:
        assert scored.item.tags & ref.tags


def test_category_mode_only_returns_same_category():
    pool = _pool()
    ref = pool[0]
    result = rank(ref, pool, limit=10, mode="category")
    # newest first on the flat 0.5 score
    assert result.ids() == ["p3", "p2"]
    assert all(s.item.category == "web" and s.score == 0.5 for s in result)


def test_mixed_mode_excludes_unrelated():
    pool = _pool()
    result = rank(pool[0], pool, limit=10, mode="mixed")
    assert "p5" not in result.ids()
    assert result.ids() == ["p4", "p3", "p2", "p6"]


def test_untagged_reference_in_tag_mode_is_empty():
    ref = _item("ref", "web", set())
    assert len(rank(ref, _pool(), limit=3, mode="tag")) == 0


@pytest.mark.parametrize("mode", ["tag", "category", "mixed"])
def test_empty_pool_yields_empty_result(mode):
    ref = _item("ref", "web", {"react"})
    result = rank(ref, [], limit=3, mode=mode)
    assert result.items == ()
    assert result.mode == RankMode(mode)


def test_fewer_qualifying_than_limit_returns_all_without_padding():
    ref = _item("ref", "devops", {"docker"})
    result = rank(ref, _pool(), limit=5)
    assert result.ids() == ["p5"]


def test_duplicate_candidates_counted_once():
    pool = _pool()
    result = rank(pool[0], pool + pool, limit=10)
    assert len(result.ids()) == len(set(result.ids()))


@pytest.mark.parametrize("limit", [0, -1, 2.5, "3", True, None])
def test_invalid_limit_raises(limit):
    ref = _item("ref", "web", {"react"})
    with pytest.raises(InvalidArgument):
        rank(ref, _pool(), limit=limit)


def test_invalid_limit_raises_even_with_empty_pool():
    with pytest.raises(InvalidArgument):
        rank(_item("ref", "web", set()), [], limit=0)


@pytest.mark.parametrize("mode", ["tags", "MIXED", "", None, "points"])
def test_invalid_mode_raises(mode):
    ref = _item("ref", "web", {"react"})
    with pytest.raises(InvalidArgument):
        rank(ref, _pool(), limit=3, mode=mode)


def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        rank(_item("ref", "web", set()), [], limit=-5)


def test_rank_by_points_orders_and_backfills():
    ref = _item("ref", "web", {"react", "javascript"})
    result = rank_by_points(ref, _pool(), limit=10)

    # p1: 5+2, p2: 5+1, p3: 5, p4: 2, p6: 1, p5: 0 (backfill)
    assert result.ids() == ["p1", "p2", "p3", "p4", "p6", "p5"]
    assert [s.score for s in result] == [7.0, 6.0, 5.0, 2.0, 1.0, 0.0]
    assert result.mode is None


def test_rank_by_points_min_score_drops_tail():
    ref = _item("ref", "web", {"react", "javascript"})
    result = rank_by_points(ref, _pool(), limit=10, min_score=1.0)
    assert "p5" not in result.ids()


def test_rank_by_points_validates_limit():
    with pytest.raises(InvalidArgument):
        rank_by_points(_item("ref", "web", set()), _pool(), limit=0)


def test_category_mode_matches_uncategorised_posts_together():
    ref = _item("ref", "", {"x"})
    pool = [_item("b", "", {"y"}), _item("c", "web", {"x"})]
    assert rank(ref, pool, limit=3, mode="category").ids() == ["b"]
