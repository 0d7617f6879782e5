"""Imaging capability interface and its Pillow implementation."""

from __future__ import annotations

from .backend import ImagingBackend
from .pillow_backend import PillowBackend, scaled_height

__all__ = ["ImagingBackend", "PillowBackend", "scaled_height"]
