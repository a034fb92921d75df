"""CLI job to run one worst-rated search and print the JSON result."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from flopmap.core.config import get_settings
from flopmap.core.models import SearchFailure
from flopmap.core.pipeline import build_search_service
from flopmap.etl.transform import to_failure_payload, to_search_payload

logger = logging.getLogger(__name__)


def run_search_job(
    *,
    query: str,
    radius: Optional[int],
    max_results: Optional[int],
    categories: Optional[List[str]],
) -> int:
    settings = get_settings()
    stack = build_search_service(settings)

    outcome = stack.service.search(query, radius=radius, max_results=max_results, categories=categories)
    if isinstance(outcome, SearchFailure):
        print(json.dumps(to_failure_payload(outcome), ensure_ascii=False, indent=2))
        return 1

    print(json.dumps(to_search_payload(outcome, photo_url=stack.places.photo_url), ensure_ascii=False, indent=2))
    logger.info("Completed search: %d places shown, %d found", len(outcome.places), outcome.total_found)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Find the worst-rated places around a location")
    parser.add_argument("query", help='Location: "Paris, France", "75001", "48.8566, 2.3522"...')
    parser.add_argument(
        "--radius",
        dest="radius",
        type=int,
        default=settings.default_radius,
        help="Search radius in meters (1-50000)",
    )
    parser.add_argument(
        "--max-results",
        dest="max_results",
        type=int,
        default=settings.default_max_results,
        help="Number of places to return (1-50)",
    )
    parser.add_argument(
        "--type",
        dest="categories",
        action="append",
        help="Place category to search, repeatable (e.g. --type restaurant --type bar)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        code = run_search_job(
            query=args.query,
            radius=args.radius,
            max_results=args.max_results,
            categories=args.categories,
        )
    except RuntimeError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    sys.exit(code)


if __name__ == "__main__":
    main()
