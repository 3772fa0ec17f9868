from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "posts.json"
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))

# Remote catalog endpoint; when set it wins over CATALOG_PATH at API startup
CATALOG_URL: Optional[str] = os.getenv("CATALOG_URL") or None


# ---------------------------
# Scoring
# ---------------------------

CATEGORY_BONUS = 0.5      # flat score for an exact category match

# points scheme used by the slug endpoint
CATEGORY_POINTS = 5
TAG_POINT = 1


# ---------------------------
# Result size policy
# ---------------------------

DEFAULT_LIMIT = int(os.getenv("RELATED_DEFAULT_LIMIT", "3"))
MAX_LIMIT = int(os.getenv("RELATED_MAX_LIMIT", "20"))  # API clamp only; the ranker has no ceiling
DEFAULT_MODE = "mixed"


# ---------------------------
# Text processing
# ---------------------------

MAX_INPUT_CHARS = 20_000


# ---------------------------
# Catalog fetch / HTTP hardening
# ---------------------------

HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 7.0
HTTP_MAX_REDIRECTS = 2
HTTP_MAX_BYTES = 5_000_000  # 5 MB cap

HTTP_USER_AGENT = "relatedposts/1.0 (+https://example.com)"


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class RelatedPost(BaseModel):
    """
    A single related post as returned to API clients.
    """

    id: str
    slug: str = ""
    title: str = ""
    excerpt: str = ""
    category: str
    tags: List[str] = Field(default_factory=list)
    matchingTags: List[str] = Field(default_factory=list)
    publishedAt: str
    score: float = Field(ge=0)


class CurrentPost(BaseModel):
    id: str
    slug: str = ""
    title: str = ""


class RelatedPostsData(BaseModel):
    relatedPosts: List[RelatedPost]
    algorithm: str
    currentPost: CurrentPost


class RelatedPostsResponse(BaseModel):
    """
    Envelope for the related-posts endpoints.
    """

    success: bool = True
    message: str
    data: RelatedPostsData


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
