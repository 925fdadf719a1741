import asyncio

from domains.image_upload.executor import UploadExecutor, UploadTask


def test_upload_file_puts_object_and_keeps_local_file(tmp_path, storage):
    image = tmp_path / "cat.PNG"
    image.write_bytes(b"\x89PNG fake")
    executor = UploadExecutor(storage, key_prefix="tmp/uploads")

    result = asyncio.run(executor.upload_file(image))

    assert result.success
    assert result.original_filename == "cat.PNG"
    assert result.storage_key.startswith("tmp/uploads/")
    assert result.storage_key.endswith(".PNG")
    assert result.storage_key == f"tmp/uploads/{result.uploaded_name}"
    assert result.url == f"https://test-bucket.nyc3.digitaloceanspaces.com/{result.storage_key}"
    assert result.error is None

    assert storage.puts == [
        {"key": result.storage_key, "body": b"\x89PNG fake", "content_type": "image/png"}
    ]
    assert image.read_bytes() == b"\x89PNG fake"


def test_declared_content_type_wins(storage):
    executor = UploadExecutor(storage)

    result = asyncio.run(executor.upload_bytes(b"data", "upload.bin", content_type="image/heic"))

    assert result.success
    assert result.storage_key.endswith(".bin")
    assert storage.puts[0]["content_type"] == "image/heic"


def test_backend_failure_is_returned_as_value(tmp_path, failing_storage):
    image = tmp_path / "dog.jpg"
    image.write_bytes(b"jpeg")
    executor = UploadExecutor(failing_storage)

    result = asyncio.run(executor.upload_file(image))

    assert not result.success
    assert result.original_filename == "dog.jpg"
    assert "AccessDenied" in result.error
    assert result.url is None
    assert image.exists()


def test_missing_source_file_is_returned_as_value(tmp_path, storage):
    executor = UploadExecutor(storage)

    result = asyncio.run(executor.upload_file(tmp_path / "gone.png"))

    assert not result.success
    assert result.original_filename == "gone.png"
    assert result.error
    assert storage.puts == []


def test_task_without_source_fails_cleanly(storage):
    executor = UploadExecutor(storage)

    result = asyncio.run(executor.upload(UploadTask(original_filename="empty.png")))

    assert not result.success
    assert "No data source" in result.error


def test_each_attempt_gets_a_new_key(tmp_path, storage):
    image = tmp_path / "same.gif"
    image.write_bytes(b"gif")
    executor = UploadExecutor(storage)

    first = asyncio.run(executor.upload_file(image))
    second = asyncio.run(executor.upload_file(image))

    assert first.success and second.success
    assert first.storage_key != second.storage_key
    assert len(storage.puts) == 2
