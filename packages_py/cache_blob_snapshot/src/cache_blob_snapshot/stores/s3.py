"""
S3 blob snapshot store.

Each container is an S3 bucket; snapshot metadata is kept in the object's
native ContentType / CacheControl fields. Calls into boto3 are blocking and
run in worker threads.
"""
import asyncio
import logging
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from ..types import (
    BlobNotFoundError,
    BlobSnapshotEntry,
    BlobSnapshotStore,
    BlobStoreError,
    BlobStoreTimeoutError,
    ContainerNotFoundError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_CONTAINER_NOT_FOUND_CODES = {"NoSuchBucket"}
_TIMEOUT_CODES = {"RequestTimeout", "RequestTimeoutException", "OperationTimedOut"}
_ALREADY_EXISTS_CODES = {"BucketAlreadyOwnedByYou"}


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def _translate_error(exc: Exception, container: str, key: Optional[str] = None) -> BlobStoreError:
    """Map a botocore error onto the blob store error taxonomy."""
    target = f"{container}/{key}" if key else container

    if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)):
        return BlobStoreTimeoutError(f"Timed out accessing '{target}': {exc}")

    if isinstance(exc, ClientError):
        code = _error_code(exc)
        if code in _CONTAINER_NOT_FOUND_CODES:
            return ContainerNotFoundError(f"Bucket '{container}' does not exist")
        if code in _NOT_FOUND_CODES:
            return BlobNotFoundError(f"Object '{target}' not found")
        if code in _TIMEOUT_CODES:
            return BlobStoreTimeoutError(f"Timed out accessing '{target}' ({code})")
        return BlobStoreError(f"S3 error {code or 'unknown'} accessing '{target}'")

    return BlobStoreError(f"S3 error accessing '{target}': {exc}")


class S3BlobStore(BlobSnapshotStore):
    """
    S3-compatible blob store.

    Example:
        store = S3BlobStore(region_name="eu-west-1")
        await store.ensure_container("http-snapshots")
        await store.put("http-snapshots", "api.example.com/items", b"[]", "application/json")
    """

    def __init__(
        self,
        client: Any = None,
        *,
        storage_class: Optional[str] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Create a new S3BlobStore.

        Args:
            client: boto3 S3 client. Created from the default session when omitted
            storage_class: S3 storage class for new objects. Default: bucket default
            region_name: Region for the created client and for new buckets
            endpoint_url: Custom endpoint (MinIO, LocalStack, ...)
        """
        if client is None:
            session = boto3.session.Session()
            client_args = {"region_name": region_name, "endpoint_url": endpoint_url}
            client = session.client("s3", **{k: v for k, v in client_args.items() if v})
        self._client = client
        self._storage_class = storage_class
        self._region_name = region_name or client.meta.region_name

    async def _call(self, func: Callable[..., Any], **kwargs: Any) -> Any:
        return await asyncio.to_thread(func, **kwargs)

    async def get(self, container: str, key: str) -> BlobSnapshotEntry:
        """Download an object."""
        try:
            response = await self._call(self._client.get_object, Bucket=container, Key=key)
            payload = await asyncio.to_thread(response["Body"].read)
        except (ClientError, ConnectTimeoutError, ReadTimeoutError) as exc:
            raise _translate_error(exc, container, key) from exc

        return BlobSnapshotEntry(
            payload=payload,
            content_type=response.get("ContentType") or "application/octet-stream",
            cache_control=response.get("CacheControl"),
            last_modified=response.get("LastModified"),
        )

    async def put(
        self,
        container: str,
        key: str,
        payload: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
    ) -> None:
        """Upload an object, replacing any existing one."""
        kwargs = {
            "Bucket": container,
            "Key": key,
            "Body": payload,
            "ContentType": content_type,
        }
        if cache_control:
            kwargs["CacheControl"] = cache_control
        if self._storage_class:
            kwargs["StorageClass"] = self._storage_class

        try:
            await self._call(self._client.put_object, **kwargs)
        except (ClientError, ConnectTimeoutError, ReadTimeoutError) as exc:
            raise _translate_error(exc, container, key) from exc

    async def ensure_container(self, container: str) -> None:
        """Create the bucket if it does not exist yet."""
        kwargs: dict = {"Bucket": container}
        if self._region_name and self._region_name != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region_name}

        try:
            await self._call(self._client.create_bucket, **kwargs)
        except ClientError as exc:
            if _error_code(exc) in _ALREADY_EXISTS_CODES:
                logger.debug("Bucket %s already exists", container)
                return
            raise _translate_error(exc, container) from exc
        except (ConnectTimeoutError, ReadTimeoutError) as exc:
            raise _translate_error(exc, container) from exc

    async def close(self) -> None:
        """Close the underlying client."""
        close = getattr(self._client, "close", None)
        if close is not None:
            await asyncio.to_thread(close)


def create_s3_blob_store(
    client: Any = None,
    *,
    storage_class: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> S3BlobStore:
    """Create an S3 blob store."""
    return S3BlobStore(
        client,
        storage_class=storage_class,
        region_name=region_name,
        endpoint_url=endpoint_url,
    )
