"""
CLI helper to load the configured catalog and seed it with sample data.

Runs the same load sequence as the site: every collection is fetched, empty
project/gallery collections get the sample data, and missing settings are
resolved against the defaults.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sitecatalog.config import get_settings
from sitecatalog.dependencies import build_catalog_sync
from sitecatalog.sync import LoadState

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the site catalog")
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Sync against a remote catalog API instead of the local store",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL for this run",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Only report what is stored, never insert sample data",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    overrides = {"auto_seed": not args.no_seed}
    if args.api_url:
        overrides["catalog_api_url"] = args.api_url
    if args.database_url:
        overrides["database_url"] = args.database_url
    settings = get_settings().model_copy(update=overrides)

    sync = build_catalog_sync(settings)
    if sync.load() is not LoadState.READY:
        logger.error("Catalog load failed: %s", sync.error)
        return 1

    logger.info(
        "Catalog has %d projects and %d gallery items",
        len(sync.projects),
        len(sync.gallery),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
