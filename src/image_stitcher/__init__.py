"""Public package exports for the image stitcher."""

from __future__ import annotations

from .batch import StitchFailure, StitchSuccess, run_batch
from .config import StitcherConfig, StitchRequest, parse_request
from .errors import (
    DecodeError,
    EncodeError,
    FetchError,
    PublishError,
    StitchError,
    ValidationError,
)
from .pipeline import stitch

__all__ = [
    "DecodeError",
    "EncodeError",
    "FetchError",
    "PublishError",
    "StitchError",
    "StitchFailure",
    "StitchRequest",
    "StitchSuccess",
    "StitcherConfig",
    "ValidationError",
    "parse_request",
    "run_batch",
    "stitch",
]
