from __future__ import annotations

from typing import Any, List, Mapping, Optional

import httpx
from loguru import logger

from .config import (
    HTTP_CONNECT_TIMEOUT,
    HTTP_READ_TIMEOUT,
    HTTP_MAX_REDIRECTS,
    HTTP_MAX_BYTES,
    HTTP_USER_AGENT,
)
from .catalog_build import unwrap_records
from .errors import CatalogError


def fetch_catalog_records(url: str) -> Optional[List[Mapping[str, Any]]]:
    """
    Fetch a JSON list of posts from a remote catalog endpoint.

    Hardening:
      - httpx with connect/read timeouts and bounded redirects
      - byte cap on the response body
      - returns None (and logs) instead of raising
    """
    headers = {"User-Agent": HTTP_USER_AGENT, "Accept": "application/json"}
    try:
        with httpx.Client(
            follow_redirects=True,
            timeout=httpx.Timeout(HTTP_READ_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT),
            max_redirects=HTTP_MAX_REDIRECTS,
        ) as client:
            r = client.get(url, headers=headers)
            if r.status_code >= 400:
                logger.warning("Catalog fetch: HTTP {} for {}", r.status_code, url)
                return None

            if len(r.content) > HTTP_MAX_BYTES:
                logger.warning("Catalog fetch aborted: {} bytes > {} limit", len(r.content), HTTP_MAX_BYTES)
                return None

            payload = r.json()
    except httpx.TimeoutException:
        logger.warning("Catalog fetch timeout for {}", url)
        return None
    except httpx.HTTPError as e:
        logger.warning("Catalog fetch exception for {}: {}", url, e)
        return None
    except ValueError as e:
        logger.warning("Catalog fetch returned invalid JSON from {}: {}", url, e)
        return None

    try:
        records = unwrap_records(payload)
    except CatalogError as e:
        logger.warning("Catalog fetch: unexpected payload from {}: {}", url, e)
        return None

    logger.info("Fetched {} catalog records from {}", len(records), url)
    return records
