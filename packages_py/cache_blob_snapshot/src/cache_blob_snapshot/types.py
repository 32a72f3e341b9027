"""
Types for HTTP blob snapshot caching.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, runtime_checkable

import httpx


@dataclass
class CacheControlDirectives:
    """Parsed Cache-Control directives."""

    no_cache: bool = False
    """Response must be revalidated before use; such responses are not stored."""


@dataclass
class BlobSnapshotEntry:
    """A stored HTTP response snapshot."""

    payload: bytes
    """Raw response body."""

    content_type: str
    """Content-Type of the stored body."""

    cache_control: Optional[str] = None
    """Cache-Control of the upstream response, if any."""

    last_modified: Optional[datetime] = None
    """Last modification time, supplied by the store."""


class BlobStoreError(Exception):
    """Error raised by a blob store adapter."""

    code = "BLOB_STORE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.name = type(self).__name__


class BlobNotFoundError(BlobStoreError):
    """The requested blob does not exist."""

    code = "BLOB_NOT_FOUND"


class ContainerNotFoundError(BlobStoreError):
    """The container (namespace) does not exist yet."""

    code = "CONTAINER_NOT_FOUND"


class BlobStoreTimeoutError(BlobStoreError):
    """The store did not answer in time."""

    code = "OPERATION_TIMED_OUT"


EXPECTED_MISS_ERRORS = (BlobNotFoundError, ContainerNotFoundError, BlobStoreTimeoutError)
"""Read failures that simply mean "not cached"."""


class BlobSnapshotStore(ABC):
    """Blob store adapter interface."""

    @abstractmethod
    async def get(self, container: str, key: str) -> BlobSnapshotEntry:
        """
        Read a blob.

        Raises:
            BlobNotFoundError: No blob under the key
            ContainerNotFoundError: The container does not exist
            BlobStoreTimeoutError: The store timed out
            BlobStoreError: Any other failure
        """
        pass

    @abstractmethod
    async def put(
        self,
        container: str,
        key: str,
        payload: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> None:
        """
        Write a blob, replacing any existing one.

        Raises:
            ContainerNotFoundError: The container does not exist
            BlobStoreError: Any other failure
        """
        pass

    @abstractmethod
    async def ensure_container(self, container: str) -> None:
        """Create the container if it is absent. Idempotent."""
        pass

    async def close(self) -> None:
        """Close the store and release resources."""
        pass


@runtime_checkable
class RequestFilter(Protocol):
    """Decides whether a request may be served from and stored in the cache."""

    def matches(self, request: httpx.Request) -> bool:
        ...


@runtime_checkable
class KeySelector(Protocol):
    """Maps a request to its blob key."""

    def select_key(self, request: httpx.Request, config: Any) -> str:
        ...


class BlobSnapshotEventType(str, Enum):
    """Event types for snapshot operations."""

    HIT = "snapshot:hit"
    MISS = "snapshot:miss"
    BYPASS = "snapshot:bypass"
    STORE = "snapshot:store"
    STORE_FAILED = "snapshot:store-failed"
    READ_FAILED = "snapshot:read-failed"
    CONTAINER_CREATED = "snapshot:container-created"


@dataclass
class BlobSnapshotEvent:
    """Snapshot event."""

    type: BlobSnapshotEventType
    key: Optional[str]
    url: str
    timestamp: float
    metadata: Optional[Dict[str, Any]] = None


BlobSnapshotEventListener = Callable[[BlobSnapshotEvent], None]
"""Event listener type."""

NextHandler = Callable[[httpx.Request], Awaitable[httpx.Response]]
"""Coroutine function performing the real request."""
