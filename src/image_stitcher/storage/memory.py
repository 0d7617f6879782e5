"""Dictionary-backed object store for tests and dry runs."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path

from image_stitcher.errors import ObjectNotFoundError


@dataclass(slots=True)
class StoredObject:
    """Bytes plus the metadata a put recorded."""

    data: bytes
    content_type: str | None = None


@dataclass
class InMemoryObjectStore:
    """
    Keep objects in a nested ``{bucket: {key: StoredObject}}`` mapping.

    ``put`` returns the MD5 hex digest of the payload, matching the ETag
    an S3-compatible store reports for single-part uploads. Every call is
    recorded in ``calls`` so tests can assert on store traffic.
    """

    buckets: dict[str, dict[str, StoredObject]] = field(default_factory=dict)
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    def add(self, bucket: str, key: str, data: bytes) -> None:
        """Seed an object without recording a call."""
        self.buckets.setdefault(bucket, {})[key] = StoredObject(data)

    def get(self, bucket: str, key: str) -> bytes:
        self.calls.append(("get", bucket, key))
        try:
            return self.buckets[bucket][key].data
        except KeyError as exc:
            msg = f"{bucket}/{key}"
            raise ObjectNotFoundError(msg) from exc

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str:
        self.calls.append(("put", bucket, key))
        self.buckets.setdefault(bucket, {})[key] = StoredObject(
            data, content_type,
        )
        return hashlib.md5(data).hexdigest()  # noqa: S324

    @classmethod
    def from_directory(cls, bucket: str, directory: Path) -> InMemoryObjectStore:
        """Seed ``bucket`` with every file under ``directory``."""
        store = cls()
        root = Path(directory)
        for path in sorted(root.rglob("*")):
            if path.is_file():
                store.add(bucket, path.relative_to(root).as_posix(),
                          path.read_bytes())
        return store
