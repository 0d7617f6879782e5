"""Pillow implementation of the imaging backend."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from image_stitcher.constants import (
    COLOR_MODE_RGB,
    COLOR_MODE_RGBA,
    INTERMEDIATE_FORMAT,
    LOSSY_FORMATS,
    PIL_FORMATS,
)
from image_stitcher.errors import DecodeError, EncodeError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_stitcher.color import BackgroundColor
    from image_stitcher.type_defs import OutputFormat, Placement, Size


def _open(data: bytes) -> Image.Image:
    """Open an encoded buffer, mapping Pillow failures to DecodeError."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        msg = f"Could not decode image: {exc}"
        raise DecodeError(msg) from exc
    return img


def scaled_height(size: Size, width: int) -> int:
    """Height scaled to ``width``, halves rounded up, at least 1."""
    w, h = size
    return max(1, int(h * width / w + 0.5))


class PillowBackend:
    """Imaging backend built on Pillow, LANCZOS resampling throughout."""

    def read_size(self, data: bytes) -> Size:
        """Return (width, height) without decoding pixel data."""
        try:
            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            msg = f"Could not read image metadata: {exc}"
            raise DecodeError(msg) from exc
        if width <= 0 or height <= 0:
            msg = f"Image has invalid dimensions {width}x{height}"
            raise DecodeError(msg)
        return width, height

    def resize(
        self,
        data: bytes,
        width: int,
        *,
        allow_upscale: bool,
    ) -> tuple[bytes, Size]:
        """
        Resize to ``width`` keeping aspect ratio.

        Without ``allow_upscale`` an image narrower than ``width`` is
        returned untouched. Resized output is re-encoded as PNG so alpha
        survives until compositing.
        """
        img = _open(data)
        if img.width == width or (img.width < width and not allow_upscale):
            return data, img.size

        new_size = (width, scaled_height(img.size, width))
        if img.mode not in (COLOR_MODE_RGB, COLOR_MODE_RGBA):
            img = img.convert(COLOR_MODE_RGBA)
        resized = img.resize(new_size, Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        resized.save(buffer, format=INTERMEDIATE_FORMAT)
        return buffer.getvalue(), resized.size

    def composite(
        self,
        size: Size,
        background: BackgroundColor,
        layers: Sequence[tuple[bytes, Placement]],
    ) -> bytes:
        """
        Alpha-composite each layer over a background-filled canvas.

        A canvas Pillow cannot allocate raises :class:`EncodeError`.
        """
        try:
            canvas = Image.new(COLOR_MODE_RGBA, size, background.to_rgba())
            for data, placement in layers:
                layer = _open(data).convert(COLOR_MODE_RGBA)
                canvas.alpha_composite(
                    layer, dest=(placement.left, placement.top),
                )
            return canvas.tobytes()
        except (ValueError, OverflowError, MemoryError) as exc:
            width, height = size
            msg = f"Could not build {width}x{height} canvas: {exc}"
            raise EncodeError(msg) from exc

    def encode(
        self,
        raw: bytes,
        size: Size,
        fmt: OutputFormat,
        quality: int,
    ) -> bytes:
        """
        Serialize raw RGBA bytes as png, jpeg or webp.

        ``quality`` only applies to the lossy formats. JPEG has no alpha
        channel so it is dropped before saving.
        """
        try:
            img = Image.frombytes(COLOR_MODE_RGBA, size, raw)
            if fmt == "jpeg":
                img = img.convert(COLOR_MODE_RGB)
            options: dict[str, int] = {}
            if fmt in LOSSY_FORMATS:
                options["quality"] = quality
            buffer = io.BytesIO()
            img.save(buffer, format=PIL_FORMATS[fmt], **options)
        except (KeyError, OSError, ValueError) as exc:
            msg = f"Could not encode canvas as {fmt}: {exc}"
            raise EncodeError(msg) from exc
        return buffer.getvalue()
