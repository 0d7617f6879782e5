"""
Test configuration and shared fixtures for image_stitcher.

Provides encoded-image factories, an in-memory object store, a fake
imaging backend for layout tests, and logger propagation for caplog.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pytest
from PIL import Image

from image_stitcher.color import BackgroundColor
from image_stitcher.imaging import PillowBackend, scaled_height
from image_stitcher.logging_utils import logger
from image_stitcher.storage import InMemoryObjectStore
from image_stitcher.type_defs import Placement, Size

RGBA = tuple[int, int, int, int]

MakeImage = Callable[..., bytes]


def encode_image(
    width: int,
    height: int,
    color: RGBA | tuple[int, int, int] = (255, 0, 0, 255),
    *,
    fmt: str = "PNG",
    mode: str = "RGBA",
) -> bytes:
    """Encode a solid-color image and return its bytes."""
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> MakeImage:
    """Factory for solid-color encoded images (PNG by default)."""
    return encode_image


@pytest.fixture
def backend() -> PillowBackend:
    """Real Pillow backend."""
    return PillowBackend()


@pytest.fixture
def store() -> InMemoryObjectStore:
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def seeded_store(make_image: MakeImage) -> InMemoryObjectStore:
    """
    Store with a ``photos`` bucket of three images.

    ``wide.png`` is 100x50 red, ``tall.png`` 100x80 green and
    ``narrow.png`` 50x40 blue.
    """
    s = InMemoryObjectStore()
    s.add("photos", "wide.png", make_image(100, 50, (255, 0, 0, 255)))
    s.add("photos", "tall.png", make_image(100, 80, (0, 255, 0, 255)))
    s.add("photos", "narrow.png", make_image(50, 40, (0, 0, 255, 255)))
    return s


@dataclass
class FakeBackend:
    """
    In-memory imaging backend keyed on fake ``WxH`` byte payloads.

    Lets layout and orchestration tests run without decoding pixels.
    """

    resize_calls: list[tuple[Size, int, bool]] = field(default_factory=list)
    composite_calls: list[tuple[Size, BackgroundColor, list[Placement]]] = (
        field(default_factory=list)
    )

    @staticmethod
    def payload(width: int, height: int) -> bytes:
        return f"{width}x{height}".encode()

    def read_size(self, data: bytes) -> Size:
        width, height = data.decode().split("x")
        return int(width), int(height)

    def resize(
        self,
        data: bytes,
        width: int,
        *,
        allow_upscale: bool,
    ) -> tuple[bytes, Size]:
        size = self.read_size(data)
        self.resize_calls.append((size, width, allow_upscale))
        if size[0] < width and not allow_upscale:
            return data, size
        new_size = (width, scaled_height(size, width))
        return self.payload(*new_size), new_size

    def composite(
        self,
        size: Size,
        background: BackgroundColor,
        layers: Sequence[tuple[bytes, Placement]],
    ) -> bytes:
        self.composite_calls.append(
            (size, background, [placement for _, placement in layers]),
        )
        return b"raw"

    def encode(self, raw: bytes, size: Size, fmt: str, quality: int) -> bytes:
        return f"{fmt}:{quality}:{size[0]}x{size[1]}".encode()


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Pixel-free backend recording resize and composite calls."""
    return FakeBackend()


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the stitcher logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)
