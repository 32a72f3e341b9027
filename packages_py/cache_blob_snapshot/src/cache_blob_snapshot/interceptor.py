"""
Read-through / write-through HTTP snapshot interceptor.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional, Set

import httpx

from .buffer import SnapshotBuffer
from .config import BlobSnapshotConfig, merge_blob_snapshot_config
from .keys import derive_key
from .policy import is_request_cacheable, is_response_cacheable
from .types import (
    EXPECTED_MISS_ERRORS,
    BlobSnapshotEntry,
    BlobSnapshotEvent,
    BlobSnapshotEventListener,
    BlobSnapshotEventType,
    BlobSnapshotStore,
    ContainerNotFoundError,
    NextHandler,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# The buffered body is decoded and has a known length.
_STALE_BODY_HEADERS = frozenset({"content-encoding", "transfer-encoding", "content-length"})


class BlobSnapshotInterceptor:
    """
    Caches successful GET responses as blobs and serves them back.

    Storage is a best-effort accelerator: any storage failure degrades to
    "as if the cache were empty". Only the real call can fail a request.

    Example:
        interceptor = BlobSnapshotInterceptor(MemoryBlobStore())

        async def send(request: httpx.Request) -> httpx.Response:
            return await inner_transport.handle_async_request(request)

        response = await interceptor.intercept(request, send)
    """

    def __init__(
        self,
        store: BlobSnapshotStore,
        config: Optional[BlobSnapshotConfig] = None,
    ) -> None:
        self._store = store
        self._config = merge_blob_snapshot_config(config)
        self._listeners: Set[BlobSnapshotEventListener] = set()

    @property
    def config(self) -> BlobSnapshotConfig:
        return self._config

    @property
    def store(self) -> BlobSnapshotStore:
        return self._store

    async def intercept(self, request: httpx.Request, call_next: NextHandler) -> httpx.Response:
        """Serve a request from the snapshot store, or execute and store it."""
        url = str(request.url)

        if not is_request_cacheable(request, self._config):
            self._emit(BlobSnapshotEventType.BYPASS, None, url, {"reason": "request-not-cacheable"})
            return await call_next(request)

        key = derive_key(request, self._config)

        entry = await self._read(key, url)
        if entry is not None:
            logger.debug("Serving HTTP snapshot %s", key)
            self._emit(BlobSnapshotEventType.HIT, key, url, {"size": len(entry.payload)})
            return self._build_response(request, entry)

        response = await call_next(request)

        if not is_response_cacheable(response):
            self._emit(
                BlobSnapshotEventType.BYPASS,
                key,
                url,
                {"reason": "response-not-cacheable", "status_code": response.status_code},
            )
            return response

        buffer = await SnapshotBuffer.from_response(response)
        await self._write(
            key,
            url,
            buffer,
            response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            response.headers.get("cache-control"),
        )

        buffer.rewind()
        return self._build_buffered_response(request, response, buffer)

    async def _read(self, key: str, url: str) -> Optional[BlobSnapshotEntry]:
        try:
            return await self._store.get(self._config.container_name, key)
        except EXPECTED_MISS_ERRORS as exc:
            logger.debug("No HTTP snapshot for %s (%s)", key, exc.code)
            self._emit(BlobSnapshotEventType.MISS, key, url, {"reason": exc.code})
        except Exception as exc:
            logger.warning("Couldn't access HTTP blob snapshot storage.", exc_info=True)
            self._emit(
                BlobSnapshotEventType.READ_FAILED, key, url, {"error": type(exc).__name__}
            )
        return None

    async def _write(
        self,
        key: str,
        url: str,
        buffer: SnapshotBuffer,
        content_type: str,
        cache_control: Optional[str],
    ) -> bool:
        container = self._config.container_name

        try:
            await self._put(key, buffer, content_type, cache_control)
        except ContainerNotFoundError:
            pass
        except Exception as exc:
            self._report_store_failure(key, url, exc)
            return False
        else:
            self._emit(BlobSnapshotEventType.STORE, key, url, {"size": buffer.size})
            return True

        # Container may not exist on the very first write; create it and retry once.
        try:
            await self._store.ensure_container(container)
            logger.info("Created HTTP snapshot container %s", container)
            self._emit(BlobSnapshotEventType.CONTAINER_CREATED, key, url, {"container": container})
            await self._put(key, buffer, content_type, cache_control)
        except Exception as exc:
            self._report_store_failure(key, url, exc)
            return False

        self._emit(BlobSnapshotEventType.STORE, key, url, {"size": buffer.size, "retried": True})
        return True

    async def _put(
        self,
        key: str,
        buffer: SnapshotBuffer,
        content_type: str,
        cache_control: Optional[str],
    ) -> None:
        buffer.rewind()
        await self._store.put(
            self._config.container_name,
            key,
            buffer.read(),
            content_type,
            cache_control,
        )

    def _report_store_failure(self, key: str, url: str, exc: Exception) -> None:
        logger.warning("Couldn't save HTTP snapshot to blob storage.", exc_info=exc)
        self._emit(BlobSnapshotEventType.STORE_FAILED, key, url, {"error": type(exc).__name__})

    def _build_response(self, request: httpx.Request, entry: BlobSnapshotEntry) -> httpx.Response:
        """Build a 200 response from a stored snapshot."""
        return httpx.Response(
            status_code=200,
            headers={
                "content-type": entry.content_type,
                "content-length": str(len(entry.payload)),
            },
            stream=SnapshotBuffer(entry.payload),
            request=request,
        )

    def _build_buffered_response(
        self,
        request: httpx.Request,
        response: httpx.Response,
        buffer: SnapshotBuffer,
    ) -> httpx.Response:
        """Rebuild the upstream response on top of the rewound buffer."""
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _STALE_BODY_HEADERS
        ]
        headers.append(("content-length", str(buffer.size)))
        return httpx.Response(
            status_code=response.status_code,
            headers=headers,
            stream=buffer,
            extensions=response.extensions,
            request=request,
        )

    def on(self, listener: BlobSnapshotEventListener) -> Callable[[], None]:
        """Add event listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: BlobSnapshotEventListener) -> None:
        """Remove event listener."""
        self._listeners.discard(listener)

    def _emit(
        self,
        event_type: BlobSnapshotEventType,
        key: Optional[str],
        url: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit an event to all listeners."""
        if not self._listeners:
            return
        event = BlobSnapshotEvent(
            type=event_type,
            key=key,
            url=url,
            timestamp=time.time(),
            metadata=metadata,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.debug("Snapshot event listener failed", exc_info=True)

    async def close(self) -> None:
        """Close the store and drop listeners."""
        await self._store.close()
        self._listeners.clear()


def create_blob_snapshot_interceptor(
    store: BlobSnapshotStore,
    config: Optional[BlobSnapshotConfig] = None,
) -> BlobSnapshotInterceptor:
    """Create a snapshot interceptor."""
    return BlobSnapshotInterceptor(store, config)
