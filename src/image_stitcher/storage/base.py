"""Object-store interface plus the fetch and publish stages built on it."""

from __future__ import annotations

from typing import Protocol

from image_stitcher.errors import (
    FetchError,
    ObjectNotFoundError,
    PublishError,
    StoreError,
)
from image_stitcher.logging_utils import logger


class ObjectStore(Protocol):
    """Minimal get/put surface of a bucket-based object store."""

    def get(self, bucket: str, key: str) -> bytes:
        """Return the object's bytes or raise a StoreError subclass."""
        ...

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str | None:
        """Write the object and return the store's content identifier."""
        ...


def fetch_object(store: ObjectStore, bucket: str, key: str) -> bytes:
    """Read one object, wrapping store failures in FetchError."""
    try:
        data = store.get(bucket, key)
    except ObjectNotFoundError as exc:
        msg = f"Object not found: {bucket}/{key}"
        raise FetchError(msg) from exc
    except StoreError as exc:
        msg = f"Failed to fetch {bucket}/{key}: {exc}"
        raise FetchError(msg) from exc
    logger.debug("Fetched %s/%s (%d bytes)", bucket, key, len(data))
    return data


def publish_object(
    store: ObjectStore,
    bucket: str,
    key: str,
    data: bytes,
    content_type: str,
) -> str | None:
    """Write the stitched image, wrapping store failures in PublishError."""
    try:
        content_id = store.put(bucket, key, data, content_type)
    except StoreError as exc:
        msg = f"Failed to upload {bucket}/{key}: {exc}"
        raise PublishError(msg) from exc
    logger.info(
        "Uploaded %s/%s (%d bytes, %s)", bucket, key, len(data), content_type,
    )
    return content_id
