"""
Blob snapshot transport wrapper for httpx.

Serves GET responses from a blob store and stores successful upstream
responses, falling back to the wrapped transport on a miss or storage failure.
"""
from typing import Callable, Optional

import httpx

from cache_blob_snapshot import (
    BlobSnapshotConfig,
    BlobSnapshotEvent,
    BlobSnapshotEventType,
    BlobSnapshotInterceptor,
    BlobSnapshotStore,
    create_memory_blob_store,
)


class BlobSnapshotTransport(httpx.AsyncBaseTransport):
    """
    Blob snapshot transport wrapper for httpx.

    Wraps another transport and caches its successful GET responses in a
    blob store.

    Example:
        base = httpx.AsyncHTTPTransport()
        transport = BlobSnapshotTransport(base, store=S3BlobStore())
        client = httpx.AsyncClient(transport=transport)
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        *,
        store: Optional[BlobSnapshotStore] = None,
        config: Optional[BlobSnapshotConfig] = None,
        on_cache_hit: Optional[Callable[[str, str], None]] = None,
        on_cache_miss: Optional[Callable[[str, str], None]] = None,
        on_cache_store: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        """
        Create a new BlobSnapshotTransport.

        Args:
            inner: The wrapped transport to delegate requests to
            store: Blob store adapter. Default: in-memory store. A store passed
                in is left open by aclose(); the caller owns it
            config: Snapshot configuration
            on_cache_hit: Callback with (url, key) when a snapshot is served
            on_cache_miss: Callback with (url, key) when no snapshot was found
            on_cache_store: Callback with (url, key) when a snapshot was saved
        """
        self._inner = inner
        self._owns_store = store is None
        self._interceptor = BlobSnapshotInterceptor(store or create_memory_blob_store(), config)
        self._on_cache_hit = on_cache_hit
        self._on_cache_miss = on_cache_miss
        self._on_cache_store = on_cache_store

        if on_cache_hit or on_cache_miss or on_cache_store:
            self._interceptor.on(self._dispatch_callbacks)

    @property
    def interceptor(self) -> BlobSnapshotInterceptor:
        return self._interceptor

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle an async HTTP request with snapshot caching."""
        return await self._interceptor.intercept(request, self._inner.handle_async_request)

    def _dispatch_callbacks(self, event: BlobSnapshotEvent) -> None:
        if event.type == BlobSnapshotEventType.HIT and self._on_cache_hit:
            self._on_cache_hit(event.url, event.key)
        elif event.type in (
            BlobSnapshotEventType.MISS,
            BlobSnapshotEventType.READ_FAILED,
        ) and self._on_cache_miss:
            self._on_cache_miss(event.url, event.key)
        elif event.type == BlobSnapshotEventType.STORE and self._on_cache_store:
            self._on_cache_store(event.url, event.key)

    async def aclose(self) -> None:
        """Close the transport, and the store if this transport created it."""
        if self._owns_store:
            await self._interceptor.close()
        else:
            self._interceptor.off(self._dispatch_callbacks)
        await self._inner.aclose()
