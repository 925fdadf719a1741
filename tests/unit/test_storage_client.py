import asyncio

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from app.utils.config import Settings
from app.utils.storage_client import SpacesStorage
from domains.image_upload.executor import UploadExecutor


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        endpoint_url="https://nyc3.digitaloceanspaces.com",
        region_name="nyc3",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
    )


def test_put_object_is_public_read(s3_client):
    storage = SpacesStorage(bucket="media", region="nyc3", client=s3_client)

    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "put_object",
            {"ETag": '"abc"'},
            {
                "Bucket": "media",
                "Key": "tmp/uploads/x.png",
                "Body": b"png",
                "ContentType": "image/png",
                "ACL": "public-read",
            },
        )
        storage.put_object("tmp/uploads/x.png", b"png", "image/png")
        stubber.assert_no_pending_responses()


def test_public_url():
    storage = SpacesStorage(bucket="media", region="ams3")
    assert storage.public_url("tmp/uploads/x.png") == (
        "https://media.ams3.digitaloceanspaces.com/tmp/uploads/x.png"
    )

    other = SpacesStorage(bucket="media", region="auto", public_domain="example-cdn.net")
    assert other.public_url("k.jpg") == "https://media.auto.example-cdn.net/k.jpg"


def test_from_settings():
    settings = Settings(
        _env_file=None,
        do_spaces_endpoint="https://fra1.digitaloceanspaces.com",
        do_spaces_region="fra1",
        do_spaces_key="key",
        do_spaces_secret="secret",
        do_spaces_bucket="bucket",
    )
    storage = SpacesStorage.from_settings(settings)

    assert storage.bucket == "bucket"
    assert storage.region == "fra1"
    assert storage.endpoint == "https://fra1.digitaloceanspaces.com"
    assert storage.public_url("a.png") == "https://bucket.fra1.digitaloceanspaces.com/a.png"


def test_client_error_becomes_failed_result(s3_client, tmp_path):
    image = tmp_path / "denied.jpg"
    image.write_bytes(b"jpg")
    storage = SpacesStorage(bucket="media", region="nyc3", client=s3_client)

    with Stubber(s3_client) as stubber:
        stubber.add_client_error(
            "put_object",
            service_error_code="AccessDenied",
            service_message="Access Denied",
            http_status_code=403,
        )
        result = asyncio.run(UploadExecutor(storage).upload_file(image))

    assert not result.success
    assert "AccessDenied" in result.error


def test_client_error_propagates_from_storage(s3_client):
    storage = SpacesStorage(bucket="media", region="nyc3", client=s3_client)

    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code="NoSuchBucket")
        with pytest.raises(ClientError):
            storage.put_object("k.png", b"png", "image/png")
