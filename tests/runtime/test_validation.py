"""Tests for runtime.validation helpers."""

from __future__ import annotations

import pytest

from image_stitcher.errors import ValidationError
from image_stitcher.runtime import validation as runtime_validation


def test_validate_sources_accepts_bucket_and_keys() -> None:
    runtime_validation.validate_sources("photos", ["a.png"])


def test_validate_sources_requires_bucket() -> None:
    with pytest.raises(ValidationError, match="Source bucket is required"):
        runtime_validation.validate_sources("", ["a.png"])


def test_validate_sources_requires_keys() -> None:
    with pytest.raises(ValidationError, match="At least one source key"):
        runtime_validation.validate_sources("photos", [])
