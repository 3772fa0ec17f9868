from __future__ import annotations

"""
FastAPI application exposing related-post lookups.

- GET /posts/related          id-based, selectable algorithm (tag/category/mixed)
- GET /posts/{slug}/related   slug-based, points scheme
- InvalidArgument -> 400, NotFound -> 404, both as {"success": false, "message": ...}
"""

from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ._singletons import get_catalog
from .catalog_build import Catalog
from .config import (
    DEFAULT_LIMIT,
    DEFAULT_MODE,
    MAX_LIMIT,
    ErrorResponse,
    HealthResponse,
    RelatedPostsResponse,
)
from .errors import CatalogError, InvalidArgument, NotFound
from .mapping import map_result_to_response
from .pipeline_types import RankMode
from .ranker import rank, rank_by_points


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI(title="relatedposts")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

_catalog: Optional[Catalog] = None


@app.on_event("startup")
def startup_event() -> None:
    global _catalog
    logger.info("Loading catalog...")
    try:
        _catalog = get_catalog()
    except CatalogError as e:
        # endpoints retry lazily and answer 503 until a catalog is available
        logger.error("Catalog load failed at startup: {}", e)
        return
    logger.info("Catalog ready with {} posts", len(_catalog))


def _current_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        _catalog = get_catalog()
    return _catalog


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    logger.info("Rejected {}: {}", request.url.path, exc)
    return _error(400, str(exc))


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    logger.info("Not found on {}: {}", request.url.path, exc)
    return _error(404, "Post not found")


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.error("Catalog unavailable for {}: {}", request.url.path, exc)
    return _error(503, "Catalog unavailable")


def _clamp_limit(limit: int) -> int:
    # non-positive values pass through so the ranker rejects them
    return min(limit, MAX_LIMIT)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/posts/related", response_model=RelatedPostsResponse)
def related_posts(
    postId: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_LIMIT),
    algorithm: str = Query(DEFAULT_MODE),
):
    if not postId or not postId.strip():
        return _error(400, "Post ID is required")

    mode = RankMode.parse(algorithm)
    catalog = _current_catalog()
    reference = catalog.get(postId)

    result = rank(reference, catalog.candidates_for(reference), limit=_clamp_limit(limit), mode=mode)
    return map_result_to_response(result, reference)


@app.get("/posts/{slug}/related", response_model=RelatedPostsResponse)
def related_posts_by_slug(slug: str, limit: int = Query(DEFAULT_LIMIT)):
    catalog = _current_catalog()
    reference = catalog.get_by_slug(slug)

    result = rank_by_points(reference, catalog.candidates_for(reference), limit=_clamp_limit(limit))
    return map_result_to_response(result, reference, message="Related posts fetched successfully")
