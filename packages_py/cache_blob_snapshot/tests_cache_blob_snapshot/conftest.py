"""Pytest configuration and fixtures for cache_blob_snapshot tests."""
import asyncio
from typing import AsyncGenerator, Iterable, List, Optional, Tuple

import httpx
import pytest

from cache_blob_snapshot import (
    BlobSnapshotConfig,
    BlobSnapshotEntry,
    BlobSnapshotInterceptor,
    MemoryBlobStore,
)


class RecordingBlobStore(MemoryBlobStore):
    """Memory store that records calls and can be told to fail."""

    def __init__(
        self,
        containers: Optional[Iterable[str]] = None,
        get_error: Optional[Exception] = None,
        put_errors: Optional[List[Exception]] = None,
        ensure_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(containers)
        self.calls: List[Tuple[str, str, Optional[str]]] = []
        self.payloads: List[bytes] = []
        self.get_error = get_error
        self.put_errors = list(put_errors or [])
        self.ensure_error = ensure_error

    @property
    def ops(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def get(self, container: str, key: str) -> BlobSnapshotEntry:
        self.calls.append(("get", container, key))
        if self.get_error is not None:
            raise self.get_error
        return await super().get(container, key)

    async def put(
        self,
        container: str,
        key: str,
        payload: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> None:
        self.calls.append(("put", container, key))
        self.payloads.append(payload)
        if self.put_errors:
            raise self.put_errors.pop(0)
        await super().put(container, key, payload, content_type, cache_control)

    async def ensure_container(self, container: str) -> None:
        self.calls.append(("ensure_container", container, None))
        if self.ensure_error is not None:
            raise self.ensure_error
        await super().ensure_container(container)


class BlockingBlobStore(MemoryBlobStore):
    """Memory store whose reads never finish."""

    def __init__(self) -> None:
        super().__init__()
        self.get_started = asyncio.Event()

    async def get(self, container: str, key: str) -> BlobSnapshotEntry:
        self.get_started.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


class BlockingPutBlobStore(MemoryBlobStore):
    """Memory store whose writes never finish."""

    def __init__(self, containers: Optional[Iterable[str]] = None) -> None:
        super().__init__(containers)
        self.put_started = asyncio.Event()

    async def put(
        self,
        container: str,
        key: str,
        payload: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> None:
        self.put_started.set()
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


class UpstreamStub:
    """Stands in for the real network call."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b'{"success": true}',
        headers: Optional[dict] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = {"content-type": "application/json"} if headers is None else headers
        self.error = error
        self.requests: List[httpx.Request] = []
        self.responses: List[httpx.Response] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        response = httpx.Response(
            status_code=self.status_code,
            headers=self.headers,
            content=self.content,
        )
        self.responses.append(response)
        return response


def get_request(url: str = "https://api.example.com/v1/items?page=2", **kwargs) -> httpx.Request:
    """Build a GET request."""
    return httpx.Request("GET", url, **kwargs)


@pytest.fixture
def store() -> RecordingBlobStore:
    """Recording store with no containers yet."""
    return RecordingBlobStore()


@pytest.fixture
def provisioned_store() -> RecordingBlobStore:
    """Recording store whose default container already exists."""
    return RecordingBlobStore(containers=["http-snapshots"])


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
async def interceptor(
    provisioned_store: RecordingBlobStore,
) -> AsyncGenerator[BlobSnapshotInterceptor, None]:
    """Interceptor over a provisioned store."""
    i = BlobSnapshotInterceptor(
        provisioned_store,
        BlobSnapshotConfig(container_name="http-snapshots"),
    )
    yield i
    await i.close()


@pytest.fixture(autouse=True)
def _default_container_name(monkeypatch):
    """Keep the environment from changing the default container."""
    monkeypatch.delenv("HTTP_BLOB_SNAPSHOT_CONTAINER", raising=False)
