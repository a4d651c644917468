#!/usr/bin/env python3
"""
Trigger server-side ingestion of exercise media.

Relays the configured crawl (ADMIN_INGEST_* env vars, or the default
seeds) to a running ingest service.

Usage:
    INGEST_SITE_URL=https://ingest.example.com ADMIN_IMPORT_TOKEN=... \
        python scripts/trigger_ingest.py

    # Override crawl parameters for a one-off run
    python scripts/trigger_ingest.py --seed https://example.com/exercises --depth 1
"""

import argparse
import asyncio
import json
import logging
import os
import sys

os.environ.setdefault("ENVIRONMENT", "development")

import httpx  # noqa: E402

from media_ingest.core.config import settings  # noqa: E402
from media_ingest.services.relay import RelayConfigError, trigger_ingest  # noqa: E402


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Trigger exercise media ingestion")
    parser.add_argument("--site", help="Ingest service base URL (INGEST_SITE_URL)")
    parser.add_argument(
        "--seed",
        action="append",
        dest="seeds",
        help="Seed URL (repeatable; ADMIN_INGEST_SEEDS)",
    )
    parser.add_argument("--depth", type=int, help="Max depth (ADMIN_INGEST_DEPTH)")
    parser.add_argument("--delay-ms", type=int, help="Delay (ADMIN_INGEST_DELAY_MS)")
    parser.add_argument("--max-pages", type=int, help="Page cap (ADMIN_INGEST_MAXPAGES)")
    return parser.parse_args(argv)


def apply_overrides(args) -> None:
    if args.site:
        settings.INGEST_SITE_URL = args.site
    if args.seeds:
        settings.ADMIN_INGEST_SEEDS = args.seeds
    if args.depth is not None:
        settings.ADMIN_INGEST_DEPTH = args.depth
    if args.delay_ms is not None:
        settings.ADMIN_INGEST_DELAY_MS = args.delay_ms
    if args.max_pages is not None:
        settings.ADMIN_INGEST_MAXPAGES = args.max_pages


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = parse_args(argv)
    apply_overrides(args)

    try:
        result = asyncio.run(trigger_ingest(settings))
    except RelayConfigError:
        print("INGEST_SITE_URL and ADMIN_IMPORT_TOKEN are required", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Ingest trigger failed: {e}", file=sys.stderr)
        return 1

    print(f"Ingest status: {result.status}")
    print(json.dumps(result.data, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
