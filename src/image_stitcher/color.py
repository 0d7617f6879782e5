"""Background color parsing for the stitched canvas."""

from __future__ import annotations

import string
from dataclasses import dataclass

from image_stitcher.constants import (
    ALPHA_MAX,
    COLOR_FALLBACK,
    COLOR_TRANSPARENT,
    HEX_RGB_LENGTH,
    HEX_RGBA_LENGTH,
    TRANSPARENT_KEYWORD,
)
from image_stitcher.errors import ValidationError
from image_stitcher.logging_utils import logger


@dataclass(frozen=True, slots=True)
class BackgroundColor:
    """RGB channels in 0-255 with alpha in 0.0-1.0."""

    r: int
    g: int
    b: int
    alpha: float

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Return an 8-bit RGBA tuple suitable for Pillow."""
        return self.r, self.g, self.b, round(self.alpha * ALPHA_MAX)


TRANSPARENT = BackgroundColor(*COLOR_TRANSPARENT)
FALLBACK = BackgroundColor(*COLOR_FALLBACK)


def _parse_hex(text: str) -> BackgroundColor | None:
    """Parse ``RRGGBB`` or ``RRGGBBAA`` without the leading hash."""
    if len(text) not in (HEX_RGB_LENGTH, HEX_RGBA_LENGTH):
        return None
    if any(ch not in string.hexdigits for ch in text):
        return None
    channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
    alpha = channels[3] / ALPHA_MAX if len(channels) == 4 else 1.0  # noqa: PLR2004
    return BackgroundColor(channels[0], channels[1], channels[2], alpha)


def parse_background_color(
    text: str | None,
    *,
    strict: bool = False,
) -> BackgroundColor:
    """
    Parse ``#RRGGBB``, ``#RRGGBBAA`` or ``transparent``.

    Empty input means transparent. Anything else falls back to opaque
    white with a warning, or raises :class:`ValidationError` when
    ``strict`` is set.
    """
    cleaned = (text or "").strip()
    if not cleaned or cleaned.lower() == TRANSPARENT_KEYWORD:
        return TRANSPARENT

    parsed = _parse_hex(cleaned.removeprefix("#"))
    if parsed is not None:
        return parsed

    if strict:
        msg = (
            f"Invalid background color {text!r}; "
            "use #RRGGBB, #RRGGBBAA or 'transparent'"
        )
        raise ValidationError(msg)
    logger.warning(
        "Unrecognized background color %r, using opaque white", text,
    )
    return FALLBACK
