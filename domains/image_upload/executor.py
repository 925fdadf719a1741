"""
Upload executor for the Image Upload domain.

The single point of contact with object storage. Every attempt is made
exactly once and every failure comes back as an ``UploadResult``.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from app.models.schemas import UploadResult
from app.utils.helpers import generate_storage_key, get_mime_type


@dataclass(slots=True)
class UploadTask:
    """One file waiting to be uploaded. Exactly one of ``source_path``/``buffer`` is set."""

    original_filename: str
    source_path: Optional[Path] = None
    buffer: Optional[bytes] = None
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> "UploadTask":
        path = Path(path)
        return cls(original_filename=path.name, source_path=path)

    async def read(self) -> bytes:
        """Load the whole payload into memory without blocking the loop."""
        if self.buffer is not None:
            return self.buffer
        if self.source_path is None:
            raise ValueError(f"No data source for {self.original_filename}")
        return await asyncio.to_thread(self.source_path.read_bytes)


class UploadExecutor:
    """Uploads one task at a time to the injected storage backend."""

    def __init__(self, storage, key_prefix: str = "tmp/uploads"):
        """
        Initialize executor.

        Args:
            storage: Object exposing ``put_object(key, body, content_type)``
                and ``public_url(key)``
            key_prefix: Logical folder for every storage key
        """
        self.storage = storage
        self.key_prefix = key_prefix

    async def upload(self, task: UploadTask) -> UploadResult:
        """
        Perform one upload attempt.

        The source file is left in place on success.

        Returns:
            UploadResult with ``success=False`` and an error message on any failure
        """
        filename = task.original_filename
        logger.info(f"Uploading: {filename}")

        try:
            body = await task.read()
            key, unique_name = generate_storage_key(filename, self.key_prefix)
            content_type = task.content_type or get_mime_type(filename)

            await asyncio.to_thread(self.storage.put_object, key, body, content_type)
            url = self.storage.public_url(key)

        except Exception as e:
            logger.error(f"Failed to upload {filename}: {e}")
            return UploadResult(success=False, original_filename=filename, error=str(e))

        logger.success(f"Uploaded successfully: {filename} -> {url}")
        return UploadResult(
            success=True,
            original_filename=filename,
            storage_key=key,
            uploaded_name=unique_name,
            url=url,
        )

    async def upload_file(self, path: Path) -> UploadResult:
        """Upload a file from the local file system."""
        return await self.upload(UploadTask.from_path(path))

    async def upload_bytes(
        self, data: bytes, filename: str, content_type: Optional[str] = None
    ) -> UploadResult:
        """Upload an in-memory payload, e.g. a multipart form file."""
        return await self.upload(
            UploadTask(original_filename=filename, buffer=data, content_type=content_type)
        )
