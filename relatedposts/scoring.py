from __future__ import annotations

"""
Pairwise similarity between two posts.

Three signals are available:

* tag overlap, normalised by the larger tag set, in [0, 1]
* a flat bonus for an exact category match
* an integer points scheme (category points + one point per shared tag)

``mixed`` blends the first two by taking the stronger signal, so a post
that shares both tags and category is never scored below either one.
"""

from .config import CATEGORY_BONUS, CATEGORY_POINTS, TAG_POINT
from .pipeline_types import ContentItem, RankMode


def same_category(a: ContentItem, b: ContentItem) -> bool:
    return a.category == b.category


def shared_tags(a: ContentItem, b: ContentItem) -> frozenset:
    return a.tags & b.tags


def tag_score(a: ContentItem, b: ContentItem) -> float:
    if not a.tags or not b.tags:
        return 0.0
    return len(a.tags & b.tags) / max(len(a.tags), len(b.tags))


def category_score(a: ContentItem, b: ContentItem) -> float:
    return CATEGORY_BONUS if same_category(a, b) else 0.0


def mixed_score(a: ContentItem, b: ContentItem) -> float:
    return max(tag_score(a, b), category_score(a, b))


def points_score(a: ContentItem, b: ContentItem) -> float:
    points = CATEGORY_POINTS if same_category(a, b) else 0
    points += TAG_POINT * len(a.tags & b.tags)
    return float(points)


_SCORERS = {
    RankMode.TAG: tag_score,
    RankMode.CATEGORY: category_score,
    RankMode.MIXED: mixed_score,
}


def score(a: ContentItem, b: ContentItem, mode: RankMode) -> float:
    """Similarity of ``b`` to reference ``a`` under ``mode``; 0.0 means no match."""
    return _SCORERS[mode](a, b)
