from __future__ import annotations

"""
Related-content ranking.

:func:`rank` scores every candidate against a reference post under one of
the three modes (``tag``, ``category``, ``mixed``), drops candidates that do
not qualify, and returns the top ``limit`` in a fully deterministic order:

    score desc, published_at desc, item_id asc

:func:`rank_by_points` is the integer points variant used by the slug
endpoint. It keeps non-matching posts as tail backfill.

Both functions are pure: no I/O, no logging, no shared state.
"""

from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_LIMIT, DEFAULT_MODE
from .errors import InvalidArgument
from .pipeline_types import ContentItem, RankMode, ScoredItem, SimilarityResult
from .scoring import points_score, score


def _validate_limit(limit) -> int:
    # bool is an int subclass; True must not read as limit=1
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be a positive integer, got {limit!r}")
    if limit <= 0:
        raise InvalidArgument(f"limit must be a positive integer, got {limit}")
    return limit


def _sort_key(scored: ScoredItem) -> Tuple[float, float, str]:
    return (-scored.score, -scored.item.published_at.timestamp(), scored.item.item_id)


def _unique_candidates(reference: ContentItem, candidates: Iterable[ContentItem]) -> List[ContentItem]:
    seen = {reference.item_id}
    out: List[ContentItem] = []
    for cand in candidates:
        if cand.item_id in seen:
            continue
        seen.add(cand.item_id)
        out.append(cand)
    return out


def _top(scored: List[ScoredItem], limit: int) -> Tuple[ScoredItem, ...]:
    scored.sort(key=_sort_key)
    return tuple(scored[:limit])


def rank(
    reference: ContentItem,
    candidates: Iterable[ContentItem],
    limit: int = DEFAULT_LIMIT,
    mode: RankMode | str = DEFAULT_MODE,
) -> SimilarityResult:
    """
    Rank ``candidates`` by similarity to ``reference``.

    Parameters
    ----------
    reference :
        The post related content is wanted for. Never returned.
    candidates :
        Candidate pool; may be empty, may contain the reference.
    limit :
        Maximum number of results, must be > 0.
    mode :
        ``tag``, ``category`` or ``mixed``.

    Raises
    ------
    InvalidArgument
        On a non-positive ``limit`` or an unknown ``mode``.
    """
    limit = _validate_limit(limit)
    parsed = RankMode.parse(mode)

    scored: List[ScoredItem] = []
    for cand in _unique_candidates(reference, candidates):
        s = score(reference, cand, parsed)
        if s > 0.0:
            scored.append(ScoredItem(item=cand, score=s))

    return SimilarityResult(
        reference_id=reference.item_id,
        mode=parsed,
        items=_top(scored, limit),
    )


def rank_by_points(
    reference: ContentItem,
    candidates: Iterable[ContentItem],
    limit: int = DEFAULT_LIMIT,
    min_score: Optional[float] = None,
) -> SimilarityResult:
    """
    Points ranking: category match is worth 5, each shared tag 1.

    Every other post is eligible, so zero-score posts fill the tail when
    fewer than ``limit`` posts match. Pass ``min_score`` to cut them off.
    """
    limit = _validate_limit(limit)

    scored: List[ScoredItem] = []
    for cand in _unique_candidates(reference, candidates):
        s = points_score(reference, cand)
        if min_score is not None and s < min_score:
            continue
        scored.append(ScoredItem(item=cand, score=s))

    return SimilarityResult(
        reference_id=reference.item_id,
        mode=None,
        items=_top(scored, limit),
    )
