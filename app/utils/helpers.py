"""
Helper utilities for the Spaces image uploader.

Naming policy and type classification shared by the HTTP layer,
the directory reconciler and the watch reactor.
"""

from pathlib import Path
from typing import Tuple, Union
from uuid import uuid4


IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def generate_uuid() -> str:
    """Generate a unique identifier."""
    return str(uuid4())


def get_file_extension(filename: Union[str, Path]) -> str:
    """Get the final extension of ``filename`` including the dot, case preserved."""
    return Path(filename).suffix


def is_image_file(filename: Union[str, Path]) -> bool:
    """Check if filename has an allowed image extension (case-insensitive)."""
    return get_file_extension(filename).lower() in IMAGE_MIME_TYPES


def get_mime_type(filename: Union[str, Path]) -> str:
    """Map a filename to the content-type declared on upload."""
    return IMAGE_MIME_TYPES.get(get_file_extension(filename).lower(), DEFAULT_MIME_TYPE)


def generate_storage_key(filename: Union[str, Path], prefix: str) -> Tuple[str, str]:
    """
    Derive a unique storage key for an original filename.

    Args:
        filename: Original filename (only its extension is kept)
        prefix: Logical folder grouping every upload

    Returns:
        Tuple of (storage key, unique filename)
    """
    unique_name = f"{generate_uuid()}{get_file_extension(filename)}"
    prefix = prefix.strip("/")
    key = f"{prefix}/{unique_name}" if prefix else unique_name
    return key, unique_name


def is_hidden(path: Union[str, Path]) -> bool:
    """Check if path is hidden (starts with dot)."""
    return Path(path).name.startswith('.')


def format_bytes(bytes_count: int) -> str:
    """Format bytes as human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024.0
    return f"{bytes_count:.1f} PB"
