"""
In-memory blob snapshot store.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..types import (
    BlobNotFoundError,
    BlobSnapshotEntry,
    BlobSnapshotStore,
    ContainerNotFoundError,
)


@dataclass
class MemoryBlobStoreStats:
    """Memory store statistics."""

    containers: int
    blobs: int
    size_bytes: int


class MemoryBlobStore(BlobSnapshotStore):
    """
    In-memory blob store with named containers.

    Containers must exist before blobs can be written to them, like a real
    blob service. Pass ``containers`` to start with some already created.
    """

    def __init__(self, containers: Optional[Iterable[str]] = None) -> None:
        self._containers: Dict[str, Dict[str, BlobSnapshotEntry]] = {
            name: {} for name in (containers or [])
        }

    def _container(self, container: str) -> Dict[str, BlobSnapshotEntry]:
        blobs = self._containers.get(container)
        if blobs is None:
            raise ContainerNotFoundError(f"Container '{container}' does not exist")
        return blobs

    async def get(self, container: str, key: str) -> BlobSnapshotEntry:
        """Get a blob by key."""
        entry = self._container(container).get(key)
        if entry is None:
            raise BlobNotFoundError(f"Blob '{key}' not found in '{container}'")
        return entry

    async def put(
        self,
        container: str,
        key: str,
        payload: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> None:
        """Store a blob, replacing any existing one."""
        self._container(container)[key] = BlobSnapshotEntry(
            payload=bytes(payload),
            content_type=content_type,
            cache_control=cache_control,
            last_modified=datetime.now(timezone.utc),
        )

    async def ensure_container(self, container: str) -> None:
        """Create a container if absent."""
        self._containers.setdefault(container, {})

    def has_container(self, container: str) -> bool:
        return container in self._containers

    def keys(self, container: str) -> List[str]:
        """Get all blob keys in a container."""
        return list(self._container(container).keys())

    async def close(self) -> None:
        """Close the store and release resources."""
        self._containers.clear()

    def get_stats(self) -> MemoryBlobStoreStats:
        """Get store statistics."""
        return MemoryBlobStoreStats(
            containers=len(self._containers),
            blobs=sum(len(blobs) for blobs in self._containers.values()),
            size_bytes=sum(
                len(entry.payload)
                for blobs in self._containers.values()
                for entry in blobs.values()
            ),
        )


def create_memory_blob_store(containers: Optional[Iterable[str]] = None) -> MemoryBlobStore:
    """Create a memory blob store."""
    return MemoryBlobStore(containers)
