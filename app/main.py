"""
Spaces Image Uploader - Main FastAPI Application

Uploads images to an S3-compatible object store (DigitalOcean Spaces):
- Single uploads through a web form or API call
- Scan-and-upload sweeps over a local inbox directory
- Automatic uploads of images that land in the inbox
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
import sys

from app.utils.config import Settings, get_settings
from app.utils.storage_client import SpacesStorage
from app.api import health, upload
from domains.image_upload.executor import UploadExecutor
from domains.image_upload.reconciler import DirectoryReconciler
from domains.image_upload.watcher import WatchReactor


def configure_logging(level: str = "INFO"):
    """Replace loguru's default sink with the application format."""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level
    )


def create_app(settings: Optional[Settings] = None, storage=None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        storage: Storage backend (defaults to a Spaces client built from settings)
    """
    settings = settings or get_settings()
    storage = storage or SpacesStorage.from_settings(settings)
    upload_dir = settings.get_upload_dir()

    executor = UploadExecutor(storage, key_prefix=settings.key_prefix)
    reconciler = DirectoryReconciler(
        executor, upload_dir, max_concurrency=settings.scan_concurrency
    )
    reactor = WatchReactor(executor, upload_dir, delay=settings.watch_delay)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(f"Starting {settings.service_name} v{settings.api_version}")
        logger.info("Initializing auto-upload system...")

        if settings.scan_on_startup:
            try:
                await reconciler.reconcile_all()
            except Exception as e:
                logger.error(f"Error scanning directory: {e}")

        if settings.watch_enabled:
            reactor.start()

        logger.success("Auto-upload system ready!")

        yield

        # Cleanup
        logger.info("Shutting down application...")
        await reactor.stop()
        logger.success("Application shut down complete")

    app = FastAPI(
        title=settings.service_name,
        version=settings.api_version,
        description="Image uploads to S3-compatible object storage",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.executor = executor
    app.state.reconciler = reconciler
    app.state.reactor = reactor

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": str(exc) if settings.log_level == "DEBUG" else "An error occurred"
            }
        )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(upload.router, tags=["Upload"])

    # Upload form, mounted last so API routes win
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="public")

    return app


configure_logging(get_settings().log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Upload form available at http://localhost:{settings.port}")
    logger.info(f"Manual scan endpoint: http://localhost:{settings.port}/scan-upload")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower()
    )
