"""
Blob snapshot store implementations.
"""
from .memory import (
    MemoryBlobStore,
    MemoryBlobStoreStats,
    create_memory_blob_store,
)
from .s3 import (
    S3BlobStore,
    create_s3_blob_store,
)

__all__ = [
    "MemoryBlobStore",
    "MemoryBlobStoreStats",
    "create_memory_blob_store",
    "S3BlobStore",
    "create_s3_blob_store",
]
