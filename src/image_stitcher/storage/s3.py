"""S3/MinIO object store backed by a boto3 client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from image_stitcher.constants import NOT_FOUND_ERROR_CODES
from image_stitcher.errors import ObjectNotFoundError, TransportError

if TYPE_CHECKING:  # pragma: no cover
    from image_stitcher.config import StoreConfig


def endpoint_url(config: StoreConfig) -> str:
    """Build the endpoint URL from host, port and TLS flag."""
    scheme = "https" if config.use_ssl else "http"
    return f"{scheme}://{config.endpoint}:{config.port}"


def create_client(config: StoreConfig) -> Any:
    """Create a boto3 S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url(config),
        aws_access_key_id=config.access_key or None,
        aws_secret_access_key=config.secret_key or None,
        region_name=config.region,
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore:
    """
    Object store adapter over an S3-compatible endpoint.

    The client is stateless per call and is shared across requests.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: StoreConfig) -> S3ObjectStore:
        """Build an adapter with a fresh client for ``config``."""
        return cls(create_client(config))

    def get(self, bucket: str, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in NOT_FOUND_ERROR_CODES:
                msg = f"{bucket}/{key}"
                raise ObjectNotFoundError(msg) from exc
            raise TransportError(str(exc)) from exc
        except BotoCoreError as exc:
            raise TransportError(str(exc)) from exc

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str | None:
        try:
            response = self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentLength=len(data),
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise TransportError(str(exc)) from exc
        etag = response.get("ETag")
        return etag.strip('"') if etag else None
