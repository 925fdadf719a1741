"""
Directory reconciler for the Image Upload domain.

Scans the inbox directory and uploads every eligible image found, with a
cap on how many uploads are in flight at once.
"""

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from app.models.schemas import UploadResult
from app.utils.helpers import is_image_file
from domains.image_upload.executor import UploadExecutor


def find_eligible(directory: Path) -> List[Path]:
    """
    List eligible image files in ``directory``, sorted by name.

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Upload directory not found: {directory}")

    return sorted(
        (p for p in directory.iterdir() if p.is_file() and is_image_file(p.name)),
        key=lambda p: p.name,
    )


def summarize(results: Iterable[UploadResult]) -> Tuple[int, int]:
    """Count (successful, failed) results."""
    successful = failed = 0
    for result in results:
        if result.success:
            successful += 1
        else:
            failed += 1
    return successful, failed


class DirectoryReconciler:
    """Scan-and-upload sweeps over a local directory."""

    def __init__(
        self,
        executor: UploadExecutor,
        directory: Path,
        max_concurrency: int = 8,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.executor = executor
        self.directory = Path(directory)
        self.max_concurrency = max_concurrency

    def ensure_directory(self, directory: Path) -> None:
        """Create ``directory`` when it is missing."""
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.warning(f"Created directory: {directory}")

    async def reconcile_all(self, directory: Optional[Path] = None) -> List[UploadResult]:
        """
        Upload every eligible image in the directory.

        Individual failures are reported in the returned list and never
        fail the pass as a whole.

        Args:
            directory: Directory to sweep (defaults to the configured one)

        Returns:
            One UploadResult per eligible file, in name order
        """
        directory = Path(directory) if directory else self.directory
        logger.info(f"Scanning directory: {directory}")

        self.ensure_directory(directory)
        image_files = find_eligible(directory)

        if not image_files:
            logger.info(f"No image files found in {directory}")
            return []

        logger.info(f"Found {len(image_files)} image(s) to upload")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded_upload(path: Path) -> UploadResult:
            async with semaphore:
                return await self.executor.upload_file(path)

        results = await asyncio.gather(*(_bounded_upload(p) for p in image_files))

        successful, failed = summarize(results)
        logger.info(f"Upload complete: {successful} successful, {failed} failed")
        return list(results)
