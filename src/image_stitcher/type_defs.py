"""
Defines shared type aliases and value objects for the image stitcher.

Centralizes reusable type hints and the transient records passed
between pipeline stages.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Literal

Alignment = Literal["left", "center", "right"]
OutputFormat = Literal["png", "jpeg", "webp"]
Size = tuple[int, int]


@dataclass(slots=True)
class SourceImage:
    """One fetched object with its decoded dimensions."""

    bucket: str
    key: str
    data: bytes
    width: int
    height: int

    @property
    def size(self) -> Size:
        """Return (width, height)."""
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class Placement:
    """Top-left offset of a source image on the canvas."""

    left: int
    top: int


@dataclass(frozen=True, slots=True)
class CanvasSize:
    """Final canvas dimensions in pixels."""

    width: int
    height: int

    def as_tuple(self) -> Size:
        """Return (width, height)."""
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class UploadDescriptor:
    """Where the stitched image was written and the store's content id."""

    bucket: str
    key: str
    content_id: str | None


@dataclass(frozen=True, slots=True)
class BinaryArtifact:
    """Encoded output attached to a result."""

    data: bytes
    mime_type: str
    file_name: str

    def to_dict(self) -> dict[str, str]:
        """Return the artifact with its payload base64 encoded."""
        return {
            "data": base64.b64encode(self.data).decode("ascii"),
            "mimeType": self.mime_type,
            "fileName": self.file_name,
        }


@dataclass(slots=True)
class StitchResult:
    """Outcome of a single successful stitch request."""

    source_bucket: str
    source_keys: list[str]
    canvas: CanvasSize
    uploaded: UploadDescriptor | None = None
    binary: dict[str, BinaryArtifact] = field(default_factory=dict)

    def to_dict(self, *, include_binary: bool = True) -> dict[str, Any]:
        """Render the result using the host runtime's camelCase schema."""
        payload: dict[str, Any] = {
            "sourceBucket": self.source_bucket,
            "sourceKeys": list(self.source_keys),
            "canvas": {
                "width": self.canvas.width,
                "height": self.canvas.height,
            },
        }
        if self.uploaded is not None:
            payload["uploaded"] = {
                "bucket": self.uploaded.bucket,
                "key": self.uploaded.key,
                "contentId": self.uploaded.content_id,
            }
        if include_binary and self.binary:
            payload["binary"] = {
                name: artifact.to_dict()
                for name, artifact in self.binary.items()
            }
        return payload
