"""
S3-compatible object storage client (DigitalOcean Spaces).

Provides:
- Lazy boto3 client construction
- Public-read object uploads
- Public URL derivation
"""

from typing import Optional

import boto3
from loguru import logger

from app.utils.config import Settings

PUBLIC_READ = "public-read"


class SpacesStorage:
    """Thin wrapper over a boto3 S3 client bound to one bucket."""

    def __init__(
        self,
        bucket: Optional[str],
        region: Optional[str],
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_domain: str = "digitaloceanspaces.com",
        client=None,
    ):
        """Initialize storage wrapper. ``client`` overrides the boto3 client."""
        self.bucket = bucket
        self.region = region
        self.endpoint = endpoint
        self.access_key = access_key
        self.secret_key = secret_key
        self.public_domain = public_domain

        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpacesStorage":
        """Build storage from application settings."""
        return cls(
            bucket=settings.do_spaces_bucket,
            region=settings.do_spaces_region,
            endpoint=settings.do_spaces_endpoint,
            access_key=settings.do_spaces_key,
            secret_key=settings.do_spaces_secret,
            public_domain=settings.public_domain,
        )

    @property
    def client(self):
        """Get boto3 client, creating it if necessary."""
        if self._client is None:
            logger.info(f"Creating S3 client for {self.endpoint or 'default endpoint'}...")
            self._client = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                region_name=self.region,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
            )
        return self._client

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        """Upload ``body`` under ``key`` with public-read visibility.

        Raises whatever botocore raises; callers decide how to report it.
        """
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ACL=PUBLIC_READ,
        )

    def public_url(self, key: str) -> str:
        """Deterministic public URL for an uploaded object."""
        return f"https://{self.bucket}.{self.region}.{self.public_domain}/{key}"
