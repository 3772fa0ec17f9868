from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd
from loguru import logger

from .config import CATALOG_PATH
from .errors import CatalogError, NotFound
from .normalize import basic_clean, normalize_identifier, normalize_tags, parse_timestamp
from .pipeline_types import ContentItem


# ---------------------------
# Column detection / standardization
# ---------------------------

# Posts come from several handlers with slightly different field names.
COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "item_id": ["id", "item_id", "postId", "post_id", "_id"],
    "category": ["category", "category_id", "categoryId", "category_slug"],
    "tags": ["tags", "tag_ids", "tagIds", "keywords"],
    "published_at": ["publishedAt", "published_at", "publishDate", "date", "created_at"],
    "slug": ["slug"],
    "title": ["title", "name"],
    "excerpt": ["excerpt", "summary", "description"],
}

CATALOG_COLUMNS = ["item_id", "category", "tags", "published_at", "slug", "title", "excerpt"]


def _standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename raw columns to the canonical internal schema.

    The first candidate present (exact, then case-insensitive) wins. A column
    already carrying the canonical name wins over every variant spelling.
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        if canon in df.columns:
            continue
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            original = lower_to_original.get(candidate.lower())
            if original is not None:
                col_map[original] = canon
                break

    logger.debug("Standardizing columns with map: {}", col_map)
    df_std = df.rename(columns=col_map)
    dup_labels = df_std.columns.duplicated()
    if dup_labels.any():
        logger.warning("Ignoring duplicate catalog columns: {}", list(df_std.columns[dup_labels]))
        df_std = df_std.loc[:, ~dup_labels]

    if "item_id" not in df_std.columns:
        raise CatalogError(f"Catalog has no id column. Found: {list(df.columns)}")
    if "category" not in df_std.columns:
        logger.warning("Catalog has no category column; every post shares the empty category")

    return df_std


def normalize_catalog_df(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Raw posts → canonical catalog frame with columns :data:`CATALOG_COLUMNS`.

    Rows without an id are dropped, as are repeated ids (first one kept).
    """
    if raw.empty:
        return pd.DataFrame(columns=CATALOG_COLUMNS)

    df = _standardize_columns(raw)
    for col in CATALOG_COLUMNS:
        if col not in df.columns:
            df[col] = None

    try:
        out = pd.DataFrame(
            {
                "item_id": df["item_id"].map(lambda v: basic_clean(v)),
                "category": df["category"].map(normalize_identifier),
                "tags": df["tags"].map(normalize_tags),
                "published_at": df["published_at"].map(parse_timestamp),
                "slug": df["slug"].map(lambda v: normalize_identifier(v)),
                "title": df["title"].map(basic_clean),
                "excerpt": df["excerpt"].map(basic_clean),
            }
        )
    except (ValueError, TypeError) as e:
        raise CatalogError(f"Failed to normalise catalog: {e}") from e

    missing = out["item_id"] == ""
    if missing.any():
        logger.warning("Dropping {} catalog rows without an id", int(missing.sum()))
        out = out[~missing]

    dupes = out["item_id"].duplicated(keep="first")
    if dupes.any():
        logger.warning(
            "Dropping {} duplicate catalog ids: {}",
            int(dupes.sum()),
            sorted(set(out.loc[dupes, "item_id"])),
        )
        out = out[~dupes]

    return out.reset_index(drop=True)[CATALOG_COLUMNS]


def unwrap_records(payload: Any) -> List[Mapping[str, Any]]:
    """Accept a bare list of posts or an object wrapping one."""
    if isinstance(payload, Mapping):
        for key in ("posts", "data", "items"):
            inner = payload.get(key)
            if isinstance(inner, list):
                return inner
            if isinstance(inner, Mapping):
                return unwrap_records(inner)
        raise CatalogError(f"No post list found under keys {sorted(payload.keys())}")
    if isinstance(payload, list):
        return payload
    raise CatalogError(f"Unsupported catalog payload type: {type(payload).__name__}")


def records_to_catalog_df(records: Any) -> pd.DataFrame:
    rows = unwrap_records(records)
    # keep nested tag/category objects as python objects
    raw = pd.DataFrame.from_records(list(rows)) if rows else pd.DataFrame()
    return normalize_catalog_df(raw)


def load_catalog_snapshot(path: Path = CATALOG_PATH) -> pd.DataFrame:
    """
    Load a post snapshot (``.json`` or ``.parquet``) and normalise it.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog snapshot not found: {path}")

    logger.info("Loading catalog snapshot from {}", path)
    ext = path.suffix.lower()
    try:
        if ext == ".parquet":
            df = normalize_catalog_df(pd.read_parquet(path))
        elif ext == ".json":
            with path.open("r", encoding="utf-8") as f:
                df = records_to_catalog_df(json.load(f))
        else:
            raise CatalogError(f"Unsupported catalog format: {path.suffix}")
    except (OSError, ValueError) as e:
        raise CatalogError(f"Failed to read catalog {path}: {e}") from e

    logger.info("Loaded catalog snapshot with {} posts", len(df))
    return df


def df_to_items(df: pd.DataFrame) -> List[ContentItem]:
    return [
        ContentItem(
            item_id=row.item_id,
            category=row.category,
            tags=row.tags,
            published_at=row.published_at,
            slug=row.slug,
            title=row.title,
            excerpt=row.excerpt,
        )
        for row in df.itertuples(index=False)
    ]


class Catalog:
    """
    Read-only snapshot of posts with id / slug lookups.

    The ranker never sees this class; callers resolve the reference here
    (raising :class:`NotFound`) and pass plain items on.
    """

    def __init__(self, items: Iterable[ContentItem]):
        self._items: List[ContentItem] = []
        self._by_id: Dict[str, ContentItem] = {}
        self._by_slug: Dict[str, ContentItem] = {}
        for item in items:
            if item.item_id in self._by_id:
                continue
            self._items.append(item)
            self._by_id[item.item_id] = item
            if item.slug:
                self._by_slug.setdefault(item.slug, item)

    @classmethod
    def from_df(cls, df: pd.DataFrame) -> "Catalog":
        return cls(df_to_items(df))

    @classmethod
    def from_path(cls, path: Path = CATALOG_PATH) -> "Catalog":
        return cls.from_df(load_catalog_snapshot(path))

    @classmethod
    def from_records(cls, records: Any) -> "Catalog":
        return cls.from_df(records_to_catalog_df(records))

    @property
    def items(self) -> List[ContentItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> ContentItem:
        try:
            return self._by_id[str(item_id).strip()]
        except KeyError:
            raise NotFound(f"Post not found: {item_id}") from None

    def get_by_slug(self, slug: str) -> ContentItem:
        try:
            return self._by_slug[normalize_identifier(slug)]
        except KeyError:
            raise NotFound(f"Post not found: {slug}") from None

    def candidates_for(self, reference: ContentItem) -> List[ContentItem]:
        return [item for item in self._items if item.item_id != reference.item_id]


if __name__ == "__main__":
    # python -m relatedposts.catalog_build
    catalog = Catalog.from_path()
    logger.info("Catalog OK: {} posts", len(catalog))
