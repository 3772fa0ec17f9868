# relatedposts/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .catalog_build import Catalog
from .config import CATALOG_PATH, DEFAULT_LIMIT, DEFAULT_MODE, LOG_LEVEL
from .errors import CatalogError, InvalidArgument, NotFound
from .mapping import POINTS_ALGORITHM, map_result_to_response
from .pipeline_types import RankMode
from .ranker import rank, rank_by_points

EXIT_NOT_FOUND = 1
EXIT_INVALID = 2


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="relatedposts",
        description="Print the posts most related to a reference post.",
    )
    ap.add_argument("--catalog", type=Path, default=CATALOG_PATH,
                    help="Catalog snapshot (.json or .parquet)")
    ref = ap.add_mutually_exclusive_group(required=True)
    ref.add_argument("--post-id", help="Reference post id")
    ref.add_argument("--slug", help="Reference post slug")
    ap.add_argument("--limit", type=int, default=DEFAULT_LIMIT)
    ap.add_argument("--mode", default=DEFAULT_MODE,
                    choices=[m.value for m in RankMode] + [POINTS_ALGORITHM])
    ap.add_argument("--log-level", default=LOG_LEVEL)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    try:
        catalog = Catalog.from_path(args.catalog)
        if args.post_id is not None:
            reference = catalog.get(args.post_id)
        else:
            reference = catalog.get_by_slug(args.slug)

        candidates = catalog.candidates_for(reference)
        if args.mode == POINTS_ALGORITHM:
            result = rank_by_points(reference, candidates, limit=args.limit)
        else:
            result = rank(reference, candidates, limit=args.limit, mode=args.mode)
    except InvalidArgument as e:
        logger.error("{}", e)
        return EXIT_INVALID
    except (NotFound, CatalogError) as e:
        logger.error("{}", e)
        return EXIT_NOT_FOUND

    print(map_result_to_response(result, reference).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
