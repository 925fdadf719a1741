"""
Pydantic models for the Spaces image uploader API.

Shared data models across the application.
"""

from typing import List, Optional
from pydantic import BaseModel


# =====================================================
# Upload Models
# =====================================================

class UploadResult(BaseModel):
    """Outcome of a single upload attempt."""
    success: bool
    original_filename: str
    storage_key: Optional[str] = None
    uploaded_name: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None


# =====================================================
# Response Models
# =====================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str


class UploadResponse(BaseModel):
    """Single image upload response."""
    success: bool
    message: str
    url: str
    filename: str


class ScanUploadResponse(BaseModel):
    """Reconciliation pass response."""
    success: bool
    message: str
    results: List[UploadResult] = []
    successful: int = 0
    failed: int = 0


class CredentialCheckResponse(BaseModel):
    """Single-file test upload response."""
    success: bool
    message: str
    test_file: str
    uploaded_url: Optional[str] = None
    total_images_found: int = 0
