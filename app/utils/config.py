"""
Configuration management for the Spaces image uploader.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # DigitalOcean Spaces (S3-compatible) Configuration
    do_spaces_endpoint: Optional[str] = None
    do_spaces_region: Optional[str] = None
    do_spaces_key: Optional[str] = None
    do_spaces_secret: Optional[str] = None
    do_spaces_bucket: Optional[str] = None
    public_domain: str = "digitaloceanspaces.com"

    # API Configuration
    port: int = 3000
    log_level: str = "INFO"
    service_name: str = "DigitalOcean Spaces Image Upload"
    api_version: str = "1.0.0"
    static_dir: Path = Path("public")
    max_upload_size: int = 5 * 1024 * 1024  # bytes

    # Upload Inbox Configuration
    upload_dir: Path = Path("/root/tmp/uploads")
    key_prefix: str = "tmp/uploads"
    scan_on_startup: bool = True
    scan_concurrency: int = 8

    # Watcher Configuration
    watch_enabled: bool = True
    watch_delay: float = 1.0  # seconds

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_upload_dir(self) -> Path:
        """Upload directory with ``~`` expanded."""
        return self.upload_dir.expanduser()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
