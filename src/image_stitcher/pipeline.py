"""Top-level orchestration for a single stitch request."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import image_stitcher.layout as stitch_layout
import image_stitcher.runtime as stitch_runtime
from image_stitcher.color import parse_background_color
from image_stitcher.config import StitchRequest, parse_request
from image_stitcher.config_defaults import DEFAULT_FETCH_WORKERS
from image_stitcher.constants import DEFAULT_FILE_STEM, MIME_TYPES
from image_stitcher.imaging import PillowBackend
from image_stitcher.logging_utils import logger
from image_stitcher.storage import fetch_object, publish_object
from image_stitcher.type_defs import (
    BinaryArtifact,
    SourceImage,
    StitchResult,
    UploadDescriptor,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Mapping, Sequence

    from image_stitcher.imaging import ImagingBackend
    from image_stitcher.storage import ObjectStore


def load_source(
    store: ObjectStore,
    backend: ImagingBackend,
    bucket: str,
    key: str,
) -> SourceImage:
    """Fetch one object and read its dimensions."""
    data = fetch_object(store, bucket, key)
    width, height = backend.read_size(data)
    return SourceImage(bucket=bucket, key=key, data=data,
                       width=width, height=height)


def load_sources(
    store: ObjectStore,
    backend: ImagingBackend,
    bucket: str,
    keys: Sequence[str],
    *,
    workers: int = DEFAULT_FETCH_WORKERS,
) -> list[SourceImage]:
    """
    Fetch and decode every key, returning images in key order.

    With ``workers`` above one, fetch and decode run on a thread pool;
    the first failing key (in key order) is re-raised.
    """
    if workers <= 1 or len(keys) <= 1:
        return [load_source(store, backend, bucket, key) for key in keys]

    with ThreadPoolExecutor(max_workers=min(workers, len(keys))) as executor:
        return list(executor.map(
            lambda key: load_source(store, backend, bucket, key), keys,
        ))


def output_file_name(request: StitchRequest) -> str:
    """Destination key when set, else ``stitched.<format>``."""
    return request.destination_key or f"{DEFAULT_FILE_STEM}.{request.format}"


def stitch(
    request: StitchRequest | Mapping[str, Any],
    store: ObjectStore,
    backend: ImagingBackend | None = None,
    *,
    fetch_workers: int = DEFAULT_FETCH_WORKERS,
    strict_colors: bool = False,
) -> StitchResult:
    """
    Stitch the request's images into one vertical canvas.

    Runs fetch, decode, normalize, composite, encode and the optional
    upload in order. Any stage failure raises a
    :class:`~image_stitcher.errors.StitchError` subclass and nothing is
    returned for the request.
    """
    req = parse_request(request)
    imaging = backend or PillowBackend()

    stitch_runtime.validate_sources(req.source_bucket, req.source_keys)
    background = parse_background_color(
        req.background_color, strict=strict_colors,
    )

    images = load_sources(
        store, imaging, req.source_bucket, req.source_keys,
        workers=fetch_workers,
    )
    logger.info(
        "Fetched %d image(s) from bucket %s", len(images), req.source_bucket,
    )

    canvas_width = stitch_layout.normalize_widths(
        images,
        imaging,
        normalize=req.normalize_width,
        target_width=req.target_width,
        allow_upscale=req.allow_upscale,
    )
    canvas, placements = stitch_layout.plan_canvas(
        images, canvas_width, spacing=req.spacing, alignment=req.alignment,
    )
    logger.info("Canvas size: %dx%d", canvas.width, canvas.height)

    raw = imaging.composite(
        canvas.as_tuple(),
        background,
        [(img.data, placement) for img, placement in zip(
            images, placements, strict=True)],
    )
    encoded = imaging.encode(raw, canvas.as_tuple(), req.format, req.quality)
    mime_type = MIME_TYPES[req.format]

    result = StitchResult(
        source_bucket=req.source_bucket,
        source_keys=list(req.source_keys),
        canvas=canvas,
    )

    if req.publishes:
        content_id = publish_object(
            store,
            req.destination_bucket,
            req.destination_key,
            encoded,
            mime_type,
        )
        result.uploaded = UploadDescriptor(
            bucket=req.destination_bucket,
            key=req.destination_key,
            content_id=content_id,
        )

    if req.output_binary:
        result.binary[req.binary_property_name] = BinaryArtifact(
            data=encoded,
            mime_type=mime_type,
            file_name=output_file_name(req),
        )
    return result
