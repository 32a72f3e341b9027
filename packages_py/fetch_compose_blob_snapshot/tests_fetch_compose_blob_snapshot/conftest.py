"""Pytest configuration and fixtures for fetch_compose_blob_snapshot tests."""
from typing import AsyncGenerator

import httpx
import pytest

from cache_blob_snapshot import BlobSnapshotConfig, MemoryBlobStore, create_memory_blob_store
from fetch_compose_blob_snapshot import BlobSnapshotTransport


class MockAsyncTransport(httpx.AsyncBaseTransport):
    """Mock async transport for testing."""

    def __init__(
        self,
        response_status: int = 200,
        response_content: bytes = b'{"success": true}',
        response_headers: dict | None = None,
    ) -> None:
        self.response_status = response_status
        self.response_content = response_content
        self.response_headers = response_headers or {"content-type": "application/json"}
        self.requests: list[httpx.Request] = []
        self.closed = False

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle the async request and return a mock response."""
        self.requests.append(request)
        return httpx.Response(
            status_code=self.response_status,
            headers=self.response_headers,
            content=self.response_content,
        )

    async def aclose(self) -> None:
        """Close the transport."""
        self.closed = True


class ErrorMockAsyncTransport(httpx.AsyncBaseTransport):
    """Mock async transport that raises errors."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Raise the configured error."""
        raise self.error

    async def aclose(self) -> None:
        """Close the transport."""
        pass


@pytest.fixture(autouse=True)
def _default_container_name(monkeypatch):
    """Keep the environment from changing the default container."""
    monkeypatch.delenv("HTTP_BLOB_SNAPSHOT_CONTAINER", raising=False)


@pytest.fixture
def mock_async_transport() -> MockAsyncTransport:
    """Create a mock async transport for testing."""
    return MockAsyncTransport()


@pytest.fixture
def memory_blob_store() -> MemoryBlobStore:
    """Create a memory blob store with the default container."""
    return create_memory_blob_store(["http-snapshots"])


@pytest.fixture
async def blob_snapshot_transport(
    mock_async_transport: MockAsyncTransport,
    memory_blob_store: MemoryBlobStore,
) -> AsyncGenerator[BlobSnapshotTransport, None]:
    """Create a blob snapshot transport for testing."""
    transport = BlobSnapshotTransport(
        mock_async_transport,
        store=memory_blob_store,
        config=BlobSnapshotConfig(container_name="http-snapshots"),
    )
    yield transport
    await transport.aclose()
