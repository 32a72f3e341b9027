"""
Blob snapshot transport wrapper for httpx's compose pattern.
"""
from cache_blob_snapshot import (
    BlobSnapshotConfig,
    BlobSnapshotEvent,
    BlobSnapshotEventType,
    BlobSnapshotInterceptor,
    BlobSnapshotStore,
    MemoryBlobStore,
    S3BlobStore,
    create_memory_blob_store,
    create_s3_blob_store,
)
from .transport import BlobSnapshotTransport
from .factory import (
    compose_transport,
    create_blob_snapshot_transport,
    create_blob_snapshot_client,
)


__all__ = [
    # Re-exported types from base package
    "BlobSnapshotConfig",
    "BlobSnapshotEvent",
    "BlobSnapshotEventType",
    "BlobSnapshotInterceptor",
    "BlobSnapshotStore",
    "MemoryBlobStore",
    "S3BlobStore",
    "create_memory_blob_store",
    "create_s3_blob_store",
    # Transport wrapper
    "BlobSnapshotTransport",
    # Factory functions
    "compose_transport",
    "create_blob_snapshot_transport",
    "create_blob_snapshot_client",
]

__version__ = "1.0.0"
