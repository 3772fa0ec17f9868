from __future__ import annotations
"""
Mapping utilities to convert ranking results into API responses.

Centralises the conversion from :class:`SimilarityResult` into the pydantic
schemas (RelatedPost / RelatedPostsResponse) so the API and the CLI emit
the same shape.
"""

from typing import List

from loguru import logger

from .config import CurrentPost, RelatedPost, RelatedPostsData, RelatedPostsResponse
from .pipeline_types import ContentItem, ScoredItem, SimilarityResult
from .scoring import shared_tags

POINTS_ALGORITHM = "points"


def _iso(item: ContentItem) -> str:
    return item.published_at.isoformat().replace("+00:00", "Z")


def to_related_post(scored: ScoredItem, reference: ContentItem) -> RelatedPost:
    item = scored.item
    return RelatedPost(
        id=item.item_id,
        slug=item.slug,
        title=item.title,
        excerpt=item.excerpt,
        category=item.category,
        tags=sorted(item.tags),
        matchingTags=sorted(shared_tags(item, reference)),
        publishedAt=_iso(item),
        score=round(float(scored.score), 6),
    )


def map_result_to_response(
    result: SimilarityResult,
    reference: ContentItem,
    message: str = "Related posts retrieved successfully",
) -> RelatedPostsResponse:
    """
    Convert a ranking result into the response envelope.
    Order is preserved exactly as ranked.
    """
    if result.reference_id != reference.item_id:
        raise ValueError(
            f"Result belongs to {result.reference_id!r}, not {reference.item_id!r}"
        )

    posts: List[RelatedPost] = [to_related_post(s, reference) for s in result]
    algorithm = result.mode.value if result.mode is not None else POINTS_ALGORITHM

    logger.info(
        "Mapped {} related posts for {} ({})", len(posts), reference.item_id, algorithm
    )
    return RelatedPostsResponse(
        success=True,
        message=message,
        data=RelatedPostsData(
            relatedPosts=posts,
            algorithm=algorithm,
            currentPost=CurrentPost(
                id=reference.item_id, slug=reference.slug, title=reference.title
            ),
        ),
    )
