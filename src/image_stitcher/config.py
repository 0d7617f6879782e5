"""
Configuration schema and loaders for the image stitcher.

Defines Pydantic models for the TOML config sections and for a single
stitch request, plus loaders for config files, batch request files and
CLI arguments.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from image_stitcher.config_defaults import (
    DEFAULT_ALIGNMENT,
    DEFAULT_ALLOW_UPSCALE,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BINARY_PROPERTY,
    DEFAULT_CONTINUE_ON_FAIL,
    DEFAULT_ENDPOINT,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_FORMAT,
    DEFAULT_NORMALIZE_WIDTH,
    DEFAULT_OUTPUT_BINARY,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PORT,
    DEFAULT_QUALITY,
    DEFAULT_SPACING,
    DEFAULT_STRICT_COLORS,
    DEFAULT_TARGET_WIDTH,
    DEFAULT_USE_SSL,
    DEFAULT_WRITE_BINARY,
)
from image_stitcher.constants import (
    ACCESS_KEY_ENV,
    DEFAULT_REGION,
    QUALITY_MAX,
    QUALITY_MIN,
    SECRET_KEY_ENV,
)
from image_stitcher.errors import ValidationError
from image_stitcher.keys import parse_source_keys
from image_stitcher.type_defs import Alignment, OutputFormat


class StoreConfig(BaseModel):
    """Connection settings for the S3/MinIO endpoint."""

    endpoint: str = Field(DEFAULT_ENDPOINT, min_length=1)
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    use_ssl: bool = DEFAULT_USE_SSL
    access_key: str = Field(
        default_factory=lambda: os.environ.get(ACCESS_KEY_ENV, ""),
        repr=False,
    )
    secret_key: str = Field(
        default_factory=lambda: os.environ.get(SECRET_KEY_ENV, ""),
        repr=False,
    )
    region: str = DEFAULT_REGION


class ProcessingConfig(BaseModel):
    """Batch policy and per-request processing switches."""

    continue_on_fail: bool = DEFAULT_CONTINUE_ON_FAIL
    fetch_workers: int = Field(DEFAULT_FETCH_WORKERS, ge=1)
    strict_colors: bool = DEFAULT_STRICT_COLORS


class OutputConfig(BaseModel):
    """Where the CLI writes binary artifacts."""

    output: str = Field(DEFAULT_OUTPUT_DIR)
    write_binary: bool = DEFAULT_WRITE_BINARY


class StitcherConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of the TOML config file.
    """

    store: StoreConfig = Field(
        default_factory=lambda: StoreConfig.model_validate({}),
    )
    processing: ProcessingConfig = Field(
        default_factory=lambda: ProcessingConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )


class StitchRequest(BaseModel):
    """
    Parameters of one stitch request.

    Fields accept both the host runtime's camelCase names
    (``sourceBucket``) and snake_case names (``source_bucket``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_bucket: str = ""
    source_keys: list[str] = Field(default_factory=list)
    spacing: int = Field(DEFAULT_SPACING, ge=0)
    alignment: Alignment = DEFAULT_ALIGNMENT
    normalize_width: bool = DEFAULT_NORMALIZE_WIDTH
    target_width: int = Field(DEFAULT_TARGET_WIDTH, ge=0)
    allow_upscale: bool = DEFAULT_ALLOW_UPSCALE
    background_color: str = DEFAULT_BACKGROUND_COLOR
    format: OutputFormat = DEFAULT_FORMAT
    quality: int = Field(DEFAULT_QUALITY, ge=QUALITY_MIN, le=QUALITY_MAX)
    destination_bucket: str = ""
    destination_key: str = ""
    output_binary: bool = DEFAULT_OUTPUT_BINARY
    binary_property_name: str = Field(DEFAULT_BINARY_PROPERTY, min_length=1)

    @field_validator("source_keys", mode="before")
    @classmethod
    def _parse_keys(cls, value: Any) -> list[str]:
        return parse_source_keys(value)

    @field_validator(
        "source_bucket",
        "destination_bucket",
        "destination_key",
        "background_color",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def publishes(self) -> bool:
        """Whether both destination bucket and key are set."""
        return bool(self.destination_bucket and self.destination_key)


def parse_request(data: Mapping[str, Any] | StitchRequest) -> StitchRequest:
    """Validate raw request data, raising the stitcher's ValidationError."""
    if isinstance(data, StitchRequest):
        return data
    try:
        return StitchRequest.model_validate(dict(data))
    except PydanticValidationError as exc:
        msg = f"Invalid stitch request: {exc}"
        raise ValidationError(msg) from exc


def _load_toml(path: str | Path) -> tomlkit.TOMLDocument:
    """Read a TOML file, raising FileNotFoundError when it is missing."""
    file_path = Path(path)
    if not file_path.is_file():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)
    with file_path.open("r", encoding="utf-8") as f:
        return tomlkit.load(f)


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str | Path) -> StitcherConfig:
        """Load and validate a stitcher configuration from a TOML file."""
        doc = _load_toml(path)
        return StitcherConfig.model_validate(doc.unwrap())


def load_requests(path: str | Path) -> list[dict[str, Any]]:
    """
    Load a batch of raw requests from a TOML file.

    The file holds an array of tables named ``requests``. Entries are
    returned unvalidated so that each one fails (or succeeds) on its own
    inside the batch driver.
    """
    doc = _load_toml(path).unwrap()
    requests = doc.get("requests")
    if not isinstance(requests, list):
        msg = f"{path}: expected an array of [[requests]] tables"
        raise ValueError(msg)
    return [dict(entry) for entry in requests]


def build_request_from_cli(args: Mapping[str, Any]) -> dict[str, Any]:
    """
    Collect every known request field present in ``args``.

    Arguments absent from ``args`` (or set to ``None``) are left to the
    model defaults, so argparse defaults should be ``argparse.SUPPRESS``.
    """
    merged: dict[str, Any] = {}
    for name in StitchRequest.model_fields:
        value = args.get(name)
        if value is not None:
            merged[name] = value
    return merged
