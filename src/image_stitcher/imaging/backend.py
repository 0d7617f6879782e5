"""Capability interface the pipeline uses for all pixel work."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_stitcher.color import BackgroundColor
    from image_stitcher.type_defs import OutputFormat, Placement, Size


class ImagingBackend(Protocol):
    """
    Decode, resize, composite and encode primitives.

    Implementations raise :class:`~image_stitcher.errors.DecodeError` for
    unreadable inputs and :class:`~image_stitcher.errors.EncodeError` for
    serialization failures.
    """

    def read_size(self, data: bytes) -> Size:
        """Return (width, height) of an encoded image."""
        ...

    def resize(
        self,
        data: bytes,
        width: int,
        *,
        allow_upscale: bool,
    ) -> tuple[bytes, Size]:
        """Resize to ``width`` keeping aspect; return bytes and new size."""
        ...

    def composite(
        self,
        size: Size,
        background: BackgroundColor,
        layers: Sequence[tuple[bytes, Placement]],
    ) -> bytes:
        """Draw layers over a filled canvas and return raw RGBA bytes."""
        ...

    def encode(
        self,
        raw: bytes,
        size: Size,
        fmt: OutputFormat,
        quality: int,
    ) -> bytes:
        """Serialize raw RGBA bytes to the requested format."""
        ...
