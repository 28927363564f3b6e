#!/usr/bin/env python3
"""CLI to create the weblog schema, run migrations and seed the sample post."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import DB_PATH
from content.store import create_sample
from db.database import dispose_engine, init_db


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the weblog database")
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Create the sample post if it does not exist",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    logging.info("Initializing %s", DB_PATH)
    init_db()
    if args.sample:
        create_sample()
        logging.info("Sample post ready at /sample")
    dispose_engine()
    logging.info("Done.")


if __name__ == "__main__":
    main()
