"""
Configuration for blob snapshot caching.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from .keys import DefaultKeySelector
from .policy import AllowAllRequestFilter
from .types import KeySelector, RequestFilter


DEFAULT_CONTAINER_NAME = "http-snapshots"


@dataclass(frozen=True)
class BlobSnapshotConfig:
    """Configuration for a snapshot interceptor."""

    container_name: str = field(
        default_factory=lambda: os.getenv("HTTP_BLOB_SNAPSHOT_CONTAINER", DEFAULT_CONTAINER_NAME)
    )
    """Container (namespace) holding all snapshots. Default: 'http-snapshots'."""

    request_filter: RequestFilter = field(default_factory=AllowAllRequestFilter)
    """Additional request filter. Default: accept all."""

    key_selector: KeySelector = field(default_factory=DefaultKeySelector)
    """Blob key selector. Default: host + path + query."""

    def __post_init__(self) -> None:
        if not self.container_name:
            object.__setattr__(self, "container_name", DEFAULT_CONTAINER_NAME)


DEFAULT_BLOB_SNAPSHOT_CONFIG = BlobSnapshotConfig(
    container_name=DEFAULT_CONTAINER_NAME,
    request_filter=AllowAllRequestFilter(),
    key_selector=DefaultKeySelector(),
)


def merge_blob_snapshot_config(
    config: Optional[BlobSnapshotConfig] = None,
) -> BlobSnapshotConfig:
    """Merge user config with defaults."""
    if config is None:
        return BlobSnapshotConfig()

    return BlobSnapshotConfig(
        container_name=config.container_name or DEFAULT_BLOB_SNAPSHOT_CONFIG.container_name,
        request_filter=config.request_filter or DEFAULT_BLOB_SNAPSHOT_CONFIG.request_filter,
        key_selector=config.key_selector or DEFAULT_BLOB_SNAPSHOT_CONFIG.key_selector,
    )
