# relatedposts/_singletons.py
from functools import lru_cache

from loguru import logger

from .catalog_build import Catalog
from .catalog_fetch import fetch_catalog_records
from .config import CATALOG_PATH, CATALOG_URL


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    # remote catalog first when configured, local snapshot otherwise
    if CATALOG_URL:
        records = fetch_catalog_records(CATALOG_URL)
        if records is not None:
            return Catalog.from_records(records)
        logger.warning("Remote catalog unavailable; falling back to {}", CATALOG_PATH)
    return Catalog.from_path(CATALOG_PATH)
