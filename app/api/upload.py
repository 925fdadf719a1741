"""
Upload endpoints.

Includes:
- Single image upload from a multipart form
- Manual scan-and-upload of the inbox directory
- Single-file test upload for validating storage credentials
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.datastructures import UploadFile

from app.models.schemas import CredentialCheckResponse, ScanUploadResponse, UploadResponse
from app.utils.helpers import format_bytes
from domains.image_upload.reconciler import find_eligible, summarize

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_image(request: Request):
    """
    Upload one image from the ``image`` form field.

    Validation (presence, type, size) happens before anything is sent
    to storage. A plain text ``image`` field counts as no file.
    """
    async with request.form() as form:
        return await _upload_form_image(request, form.get("image"))


async def _upload_form_image(request: Request, image):
    settings = request.app.state.settings
    executor = request.app.state.executor

    if not isinstance(image, UploadFile):
        return JSONResponse(status_code=400, content={"error": "No file uploaded"})

    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        return JSONResponse(status_code=400, content={"error": "Only image files are allowed!"})

    limit = settings.max_upload_size
    data = await image.read(limit + 1)
    if len(data) > limit:
        logger.warning(f"Rejected {image.filename}: larger than {format_bytes(limit)}")
        return JSONResponse(
            status_code=413,
            content={"error": "File too large", "limit": limit},
        )

    result = await executor.upload_bytes(data, image.filename or "", content_type=content_type)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to upload image", "details": result.error},
        )

    return UploadResponse(
        success=True,
        message="Image uploaded successfully",
        url=result.url,
        filename=result.uploaded_name,
    )


@router.post("/scan-upload", response_model=ScanUploadResponse, response_model_exclude_none=True)
async def scan_upload(request: Request):
    """Run one reconciliation pass over the inbox directory."""
    reconciler = request.app.state.reconciler

    try:
        results = await reconciler.reconcile_all()
    except Exception as e:
        logger.error(f"Error scanning directory: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to scan and upload",
                "details": str(e),
            },
        )

    successful, failed = summarize(results)
    return ScanUploadResponse(
        success=True,
        message="Scan and upload completed",
        results=results,
        successful=successful,
        failed=failed,
    )


@router.post("/test-upload", response_model=CredentialCheckResponse)
async def test_upload(request: Request):
    """
    Upload only the first image in the inbox.

    Useful to check storage credentials without sweeping the whole
    directory. Unlike a scan, a missing directory is reported, not created.
    """
    settings = request.app.state.settings
    executor = request.app.state.executor
    directory = settings.get_upload_dir()

    logger.info("Testing single image upload...")

    try:
        image_files = find_eligible(directory)
    except FileNotFoundError:
        return JSONResponse(
            status_code=404,
            content={"error": "Upload directory not found", "path": str(directory)},
        )

    if not image_files:
        return JSONResponse(
            status_code=404,
            content={"error": "No image files found", "path": str(directory)},
        )

    test_file = image_files[0]
    logger.info(f"Testing upload with: {test_file.name}")

    result = await executor.upload_file(test_file)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Test upload failed",
                "details": result.error,
                "test_file": test_file.name,
            },
        )

    return CredentialCheckResponse(
        success=True,
        message="Test upload successful! Credentials are working.",
        test_file=test_file.name,
        uploaded_url=result.url,
        total_images_found=len(image_files),
    )
