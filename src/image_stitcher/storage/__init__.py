"""Object-store adapters and the fetch/publish stages."""

from __future__ import annotations

from .base import ObjectStore, fetch_object, publish_object
from .memory import InMemoryObjectStore
from .s3 import S3ObjectStore

__all__ = [
    "InMemoryObjectStore",
    "ObjectStore",
    "S3ObjectStore",
    "fetch_object",
    "publish_object",
]
