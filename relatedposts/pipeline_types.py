"""Typed containers shared across ranking modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional, Tuple, Union

from .errors import InvalidArgument


class RankMode(str, Enum):
    TAG = "tag"
    CATEGORY = "category"
    MIXED = "mixed"

    @classmethod
    def parse(cls, value: Union["RankMode", str]) -> "RankMode":
        """Accept a RankMode or its exact string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for mode in cls:
                if mode.value == value:
                    return mode
        valid = ", ".join(m.value for m in cls)
        raise InvalidArgument(f"Invalid algorithm {value!r}. Valid options are: {valid}")


@dataclass(frozen=True)
class ContentItem:
    """
    A single post as seen by the ranker.

    Only ``item_id``, ``category``, ``tags`` and ``published_at`` take part
    in scoring; the remaining fields are display metadata carried through.
    """

    item_id: str
    category: str
    tags: FrozenSet[str] = field(default_factory=frozenset)
    published_at: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)
    slug: str = ""
    title: str = ""
    excerpt: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))
        if self.published_at.tzinfo is None:
            object.__setattr__(self, "published_at", self.published_at.replace(tzinfo=timezone.utc))


@dataclass(frozen=True)
class ScoredItem:
    item: ContentItem
    score: float


@dataclass(frozen=True)
class SimilarityResult:
    """Ordered ranking for one reference item. ``mode`` is None for the points scheme."""

    reference_id: str
    mode: Optional[RankMode]
    items: Tuple[ScoredItem, ...] = ()

    def ids(self) -> List[str]:
        return [s.item.item_id for s in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ScoredItem]:
        return iter(self.items)
