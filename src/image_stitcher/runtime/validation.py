"""Request validation helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_stitcher.errors import ValidationError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


def validate_sources(bucket: str, keys: Sequence[str]) -> None:
    """Ensure a source bucket and at least one key were given."""
    if not bucket:
        msg = "Source bucket is required"
        raise ValidationError(msg)
    if not keys:
        msg = "At least one source key is required"
        raise ValidationError(msg)
