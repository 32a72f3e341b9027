"""
Factory functions for creating blob snapshot transports.
"""
from typing import Callable, Optional

import httpx

from cache_blob_snapshot import BlobSnapshotConfig, BlobSnapshotStore

from .transport import BlobSnapshotTransport


def compose_transport(
    base: httpx.AsyncBaseTransport,
    *wrappers: Callable[[httpx.AsyncBaseTransport], httpx.AsyncBaseTransport],
) -> httpx.AsyncBaseTransport:
    """
    Compose multiple transport wrappers together.

    Args:
        base: The base transport
        wrappers: Transport wrapper functions to apply, innermost first

    Returns:
        Composed transport

    Example:
        base = httpx.AsyncHTTPTransport()
        transport = compose_transport(
            base,
            lambda inner: BlobSnapshotTransport(inner, store=store),
        )
    """
    transport = base
    for wrapper in wrappers:
        transport = wrapper(transport)
    return transport


def create_blob_snapshot_transport(
    inner: Optional[httpx.AsyncBaseTransport] = None,
    *,
    store: Optional[BlobSnapshotStore] = None,
    config: Optional[BlobSnapshotConfig] = None,
    on_cache_hit: Optional[Callable[[str, str], None]] = None,
    on_cache_miss: Optional[Callable[[str, str], None]] = None,
    on_cache_store: Optional[Callable[[str, str], None]] = None,
) -> BlobSnapshotTransport:
    """
    Create a blob snapshot transport.

    Args:
        inner: The inner transport (defaults to AsyncHTTPTransport)
        store: Blob store adapter (defaults to an in-memory store)
        config: Snapshot configuration
        on_cache_hit: Callback when a snapshot is served
        on_cache_miss: Callback when no snapshot was found
        on_cache_store: Callback when a snapshot was saved

    Returns:
        BlobSnapshotTransport instance
    """
    if inner is None:
        inner = httpx.AsyncHTTPTransport()

    return BlobSnapshotTransport(
        inner,
        store=store,
        config=config,
        on_cache_hit=on_cache_hit,
        on_cache_miss=on_cache_miss,
        on_cache_store=on_cache_store,
    )


def create_blob_snapshot_client(
    *,
    store: Optional[BlobSnapshotStore] = None,
    config: Optional[BlobSnapshotConfig] = None,
    inner: Optional[httpx.AsyncBaseTransport] = None,
    base_url: Optional[str] = None,
    **client_kwargs,
) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient with blob snapshot caching.

    Args:
        store: Blob store adapter
        config: Snapshot configuration
        inner: The inner transport (defaults to AsyncHTTPTransport)
        base_url: Base URL for the client
        **client_kwargs: Additional arguments for httpx.AsyncClient

    Returns:
        AsyncClient with blob snapshot transport
    """
    transport = create_blob_snapshot_transport(inner, store=store, config=config)

    return httpx.AsyncClient(
        transport=transport,
        base_url=base_url or "",
        **client_kwargs,
    )
