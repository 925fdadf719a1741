import threading

import pytest


class FakeStorage:
    """In-memory stand-in for SpacesStorage that records every put."""

    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.puts: list[dict[str, object]] = []
        self._lock = threading.Lock()

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            self.puts.append({"key": key, "body": body, "content_type": content_type})

    def public_url(self, key: str) -> str:
        return f"https://test-bucket.nyc3.digitaloceanspaces.com/{key}"


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def failing_storage() -> FakeStorage:
    return FakeStorage(fail_with=RuntimeError("AccessDenied: invalid credentials"))
