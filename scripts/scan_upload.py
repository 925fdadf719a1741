#!/usr/bin/env python3
"""
Upload every image in the inbox directory once, without starting the server.

Reads storage credentials from the same environment/.env settings as the
API. Local files are left in place.

Usage:
    python scripts/scan_upload.py [--directory PATH] [--concurrency N]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.utils.config import get_settings
from app.utils.storage_client import SpacesStorage
from domains.image_upload.executor import UploadExecutor
from domains.image_upload.reconciler import DirectoryReconciler, summarize


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--directory",
        type=Path,
        default=None,
        help="Directory to sweep (default: UPLOAD_DIR setting).",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum uploads in flight (default: SCAN_CONCURRENCY setting).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None, storage=None) -> int:
    """Entry point for the CLI script."""
    args = parse_args(argv)
    settings = get_settings()

    directory = args.directory or settings.get_upload_dir()
    concurrency = args.concurrency if args.concurrency is not None else settings.scan_concurrency

    executor = UploadExecutor(
        storage or SpacesStorage.from_settings(settings),
        key_prefix=settings.key_prefix,
    )
    try:
        reconciler = DirectoryReconciler(executor, directory, max_concurrency=concurrency)
    except ValueError as e:
        logger.error(f"Invalid arguments: {e}")
        return 2

    try:
        results = asyncio.run(reconciler.reconcile_all())
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        return 1

    successful, failed = summarize(results)

    logger.info("=== Results ===")
    logger.info(f"  Success: {successful}")
    logger.info(f"  Failed: {failed}")
    for result in results:
        if result.success:
            logger.info(f"  {result.original_filename} -> {result.url}")
        else:
            logger.warning(f"  {result.original_filename}: {result.error}")

    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
