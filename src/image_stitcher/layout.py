"""Width normalization and vertical stacking layout."""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_stitcher.logging_utils import logger
from image_stitcher.type_defs import CanvasSize, Placement

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_stitcher.imaging import ImagingBackend
    from image_stitcher.type_defs import Alignment, Size, SourceImage


def resolve_target_width(
    widths: Sequence[int],
    *,
    normalize: bool,
    target_width: int = 0,
) -> int:
    """
    Return the canvas width for the given source widths.

    An explicit ``target_width`` only applies when normalizing; otherwise
    the widest source wins.
    """
    if not widths:
        msg = "No image widths provided"
        raise ValueError(msg)
    widest = max(widths)
    if normalize and target_width > 0:
        return target_width
    return widest


def normalize_widths(
    images: Sequence[SourceImage],
    backend: ImagingBackend,
    *,
    normalize: bool,
    target_width: int = 0,
    allow_upscale: bool = True,
) -> int:
    """
    Resize ``images`` in place to a common width and return canvas width.

    When ``normalize`` is false nothing is resized. Otherwise every image
    whose width differs from the target is resized, keeping its aspect
    ratio; without ``allow_upscale`` narrower images stay as they are.
    """
    canvas_width = resolve_target_width(
        [img.width for img in images],
        normalize=normalize,
        target_width=target_width,
    )
    if not normalize:
        return canvas_width

    for img in images:
        if img.width == canvas_width:
            continue
        data, (width, height) = backend.resize(
            img.data, canvas_width, allow_upscale=allow_upscale,
        )
        logger.debug(
            "Resized %s from %dx%d to %dx%d",
            img.key, img.width, img.height, width, height,
        )
        img.data, img.width, img.height = data, width, height
    return canvas_width


def stacked_height(heights: Sequence[int], spacing: int) -> int:
    """Sum of heights plus one spacing gap between each neighbor pair."""
    return sum(heights) + max(0, (len(heights) - 1) * spacing)


def alignment_offset(
    canvas_width: int,
    image_width: int,
    alignment: Alignment,
) -> int:
    """Horizontal offset of an image for the given alignment."""
    if alignment == "center":
        return (canvas_width - image_width) // 2
    if alignment == "right":
        return canvas_width - image_width
    return 0


def compute_placements(
    sizes: Sequence[Size],
    canvas_width: int,
    *,
    spacing: int,
    alignment: Alignment,
) -> list[Placement]:
    """Top-left offsets for each size, stacked top to bottom in order."""
    placements: list[Placement] = []
    top = 0
    last = len(sizes) - 1
    for index, (width, height) in enumerate(sizes):
        left = alignment_offset(canvas_width, width, alignment)
        placements.append(Placement(left=left, top=top))
        top += height + (spacing if index < last else 0)
    return placements


def plan_canvas(
    images: Sequence[SourceImage],
    canvas_width: int,
    *,
    spacing: int,
    alignment: Alignment,
) -> tuple[CanvasSize, list[Placement]]:
    """Return the canvas size and per-image placements."""
    sizes = [img.size for img in images]
    canvas = CanvasSize(
        width=canvas_width,
        height=stacked_height([h for _, h in sizes], spacing),
    )
    placements = compute_placements(
        sizes, canvas_width, spacing=spacing, alignment=alignment,
    )
    return canvas, placements
