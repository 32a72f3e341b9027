"""
HTTP response snapshots in durable blob storage.

Successful GET responses are written to a blob store and served back for
identical requests, falling back to the network on a miss or storage failure.
"""
from .types import (
    CacheControlDirectives,
    BlobSnapshotEntry,
    BlobSnapshotStore,
    BlobStoreError,
    BlobNotFoundError,
    ContainerNotFoundError,
    BlobStoreTimeoutError,
    EXPECTED_MISS_ERRORS,
    RequestFilter,
    KeySelector,
    BlobSnapshotEventType,
    BlobSnapshotEvent,
    BlobSnapshotEventListener,
    NextHandler,
)
from .parser import parse_cache_control
from .policy import (
    AllowAllRequestFilter,
    HostRequestFilter,
    PredicateRequestFilter,
    is_request_cacheable,
    is_response_cacheable,
)
from .keys import (
    DefaultKeySelector,
    QueryFilterKeySelector,
    TimeBucketKeySelector,
    FunctionKeySelector,
    derive_key,
)
from .config import (
    BlobSnapshotConfig,
    DEFAULT_CONTAINER_NAME,
    DEFAULT_BLOB_SNAPSHOT_CONFIG,
    merge_blob_snapshot_config,
)
from .buffer import SnapshotBuffer
from .interceptor import (
    BlobSnapshotInterceptor,
    create_blob_snapshot_interceptor,
)
from .stores import (
    MemoryBlobStore,
    MemoryBlobStoreStats,
    create_memory_blob_store,
    S3BlobStore,
    create_s3_blob_store,
)


__all__ = [
    # Types
    "CacheControlDirectives",
    "BlobSnapshotEntry",
    "BlobSnapshotStore",
    "BlobStoreError",
    "BlobNotFoundError",
    "ContainerNotFoundError",
    "BlobStoreTimeoutError",
    "EXPECTED_MISS_ERRORS",
    "RequestFilter",
    "KeySelector",
    "BlobSnapshotEventType",
    "BlobSnapshotEvent",
    "BlobSnapshotEventListener",
    "NextHandler",
    # Parser
    "parse_cache_control",
    # Policy
    "AllowAllRequestFilter",
    "HostRequestFilter",
    "PredicateRequestFilter",
    "is_request_cacheable",
    "is_response_cacheable",
    # Keys
    "DefaultKeySelector",
    "QueryFilterKeySelector",
    "TimeBucketKeySelector",
    "FunctionKeySelector",
    "derive_key",
    # Config
    "BlobSnapshotConfig",
    "DEFAULT_CONTAINER_NAME",
    "DEFAULT_BLOB_SNAPSHOT_CONFIG",
    "merge_blob_snapshot_config",
    # Buffer
    "SnapshotBuffer",
    # Interceptor
    "BlobSnapshotInterceptor",
    "create_blob_snapshot_interceptor",
    # Stores
    "MemoryBlobStore",
    "MemoryBlobStoreStats",
    "create_memory_blob_store",
    "S3BlobStore",
    "create_s3_blob_store",
]

__version__ = "1.0.0"
