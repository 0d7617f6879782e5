"""
Unit tests for the config module used in the image stitcher.

Covers:
- Successful loading of a valid config.toml
- Default fallbacks for missing values
- Error handling for missing files and invalid values
- Request schema aliases, coercion and CLI mapping
- Batch request files
"""
from pathlib import Path
from typing import Any

import pytest
import tomlkit
from pydantic import ValidationError as PydanticValidationError

import image_stitcher.config as stitch_config
from image_stitcher.config_defaults import (
    DEFAULT_ALIGNMENT,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BINARY_PROPERTY,
    DEFAULT_ENDPOINT,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_FORMAT,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PORT,
    DEFAULT_QUALITY,
)
from image_stitcher.constants import ACCESS_KEY_ENV, SECRET_KEY_ENV
from image_stitcher.errors import ValidationError


def create_toml_file(directory: Path, data: dict[str, Any]) -> Path:
    """Write ``data`` as TOML under ``directory`` and return its path."""
    doc = tomlkit.document()
    doc.update(data)
    path = directory / "config.toml"
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    return path


def test_load_valid_config(tmp_path: Path) -> None:
    """Test that a well-formed config.toml loads successfully."""
    path = create_toml_file(tmp_path, {
        "store": {"endpoint": "minio.local", "port": 9443, "use_ssl": True},
        "processing": {"continue_on_fail": True, "fetch_workers": 4},
        "output": {"output": "results", "write_binary": False},
    })
    cfg = stitch_config.ConfigLoader.load(path)

    assert isinstance(cfg, stitch_config.StitcherConfig)
    assert cfg.store.endpoint == "minio.local"
    assert cfg.store.port == 9443  # noqa: PLR2004
    assert cfg.store.use_ssl is True
    assert cfg.processing.continue_on_fail is True
    assert cfg.processing.fetch_workers == 4  # noqa: PLR2004
    assert cfg.processing.strict_colors is False
    assert cfg.output.output == "results"
    assert cfg.output.write_binary is False


def test_load_empty_config_uses_defaults(tmp_path: Path) -> None:
    """Missing sections fall back to their defaults."""
    path = create_toml_file(tmp_path, {})
    cfg = stitch_config.ConfigLoader.load(path)

    assert cfg.store.endpoint == DEFAULT_ENDPOINT
    assert cfg.store.port == DEFAULT_PORT
    assert cfg.processing.fetch_workers == DEFAULT_FETCH_WORKERS
    assert cfg.output.output == DEFAULT_OUTPUT_DIR


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        stitch_config.ConfigLoader.load(tmp_path / "nope.toml")


@pytest.mark.parametrize(
    "data",
    [
        {"store": {"port": 0}},
        {"store": {"port": 70000}},
        {"processing": {"fetch_workers": 0}},
        {"store": {"endpoint": ""}},
    ],
)
def test_invalid_config_values(tmp_path: Path, data: dict[str, Any]) -> None:
    path = create_toml_file(tmp_path, data)
    with pytest.raises(PydanticValidationError):
        stitch_config.ConfigLoader.load(path)


def test_credentials_default_from_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(ACCESS_KEY_ENV, "minioadmin")
    monkeypatch.setenv(SECRET_KEY_ENV, "s3cret")
    store = stitch_config.StoreConfig()

    assert store.access_key == "minioadmin"
    assert store.secret_key == "s3cret"
    assert "s3cret" not in repr(store)


def test_credentials_in_file_win(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv(ACCESS_KEY_ENV, "from-env")
    path = create_toml_file(tmp_path, {"store": {"access_key": "from-file"}})
    assert stitch_config.ConfigLoader.load(path).store.access_key == (
        "from-file"
    )


class TestStitchRequest:
    def test_defaults(self) -> None:
        req = stitch_config.StitchRequest()
        assert req.spacing == 0
        assert req.alignment == DEFAULT_ALIGNMENT
        assert req.normalize_width is True
        assert req.target_width == 0
        assert req.allow_upscale is True
        assert req.background_color == DEFAULT_BACKGROUND_COLOR
        assert req.format == DEFAULT_FORMAT
        assert req.quality == DEFAULT_QUALITY
        assert req.output_binary is True
        assert req.binary_property_name == DEFAULT_BINARY_PROPERTY
        assert req.publishes is False

    def test_camel_and_snake_case(self) -> None:
        camel = stitch_config.StitchRequest.model_validate({
            "sourceBucket": "photos",
            "sourceKeys": "a.png,b.png",
            "destinationBucket": "out",
            "destinationKey": "x.png",
            "binaryPropertyName": "image",
        })
        snake = stitch_config.StitchRequest.model_validate({
            "source_bucket": "photos",
            "source_keys": ["a.png", "b.png"],
            "destination_bucket": "out",
            "destination_key": "x.png",
            "binary_property_name": "image",
        })
        assert camel == snake
        assert camel.source_keys == ["a.png", "b.png"]
        assert camel.publishes is True

    def test_keys_object_form(self) -> None:
        req = stitch_config.StitchRequest.model_validate(
            {"sourceKeys": {"keys": [" a ", "", 7]}},
        )
        assert req.source_keys == ["a", "7"]

    def test_none_fields_become_empty(self) -> None:
        req = stitch_config.StitchRequest.model_validate({
            "sourceBucket": None,
            "destinationKey": None,
            "backgroundColor": None,
            "sourceKeys": None,
        })
        assert req.source_bucket == ""
        assert req.destination_key == ""
        assert req.background_color == ""
        assert req.source_keys == []

    def test_publishes_needs_bucket_and_key(self) -> None:
        req = stitch_config.StitchRequest(destination_key="x.png")
        assert req.publishes is False


class TestParseRequest:
    def test_passes_model_through(self) -> None:
        req = stitch_config.StitchRequest(source_bucket="b")
        assert stitch_config.parse_request(req) is req

    @pytest.mark.parametrize(
        "data",
        [
            {"quality": 101},
            {"targetWidth": -5},
            {"format": "bmp"},
            {"binaryPropertyName": ""},
        ],
    )
    def test_schema_violation_raises_stitch_error(
        self, data: dict[str, Any],
    ) -> None:
        with pytest.raises(ValidationError, match="Invalid stitch request"):
            stitch_config.parse_request(data)

    @pytest.mark.parametrize("quality", [1, 100])
    def test_quality_bounds_accepted(self, quality: int) -> None:
        req = stitch_config.parse_request({"quality": quality})
        assert req.quality == quality

    @pytest.mark.parametrize("quality", [0, 101, -3])
    def test_quality_out_of_range_rejected(self, quality: int) -> None:
        with pytest.raises(ValidationError, match="quality"):
            stitch_config.parse_request({"quality": quality})


class TestLoadRequests:
    def test_reads_request_tables(self, tmp_path: Path) -> None:
        path = tmp_path / "batch.toml"
        path.write_text(
            "[[requests]]\n"
            'sourceBucket = "photos"\n'
            'sourceKeys = ["a.png", "b.png"]\n'
            "spacing = 10\n"
            "\n"
            "[[requests]]\n"
            'source_bucket = "photos"\n'
            'source_keys = "c.png"\n',
            encoding="utf-8",
        )
        requests = stitch_config.load_requests(path)

        assert requests == [
            {"sourceBucket": "photos", "sourceKeys": ["a.png", "b.png"],
             "spacing": 10},
            {"source_bucket": "photos", "source_keys": "c.png"},
        ]

    def test_missing_requests_array(self, tmp_path: Path) -> None:
        path = create_toml_file(tmp_path, {"requests": "nope"})
        with pytest.raises(ValueError, match=r"\[\[requests\]\]"):
            stitch_config.load_requests(path)


def test_build_request_from_cli() -> None:
    args = {
        "source_bucket": "photos",
        "source_keys": "a.png,b.png",
        "spacing": 4,
        "quality": None,
        "verbose": True,
        "config": "x.toml",
    }
    assert stitch_config.build_request_from_cli(args) == {
        "source_bucket": "photos",
        "source_keys": "a.png,b.png",
        "spacing": 4,
    }


def test_example_config_loads() -> None:
    """The example config shipped at the repository root stays valid."""
    path = Path(__file__).resolve().parents[1] / "stitcher.example.toml"
    cfg = stitch_config.ConfigLoader.load(path)
    assert cfg == stitch_config.StitcherConfig.model_validate(
        {"store": {"access_key": cfg.store.access_key,
                   "secret_key": cfg.store.secret_key}},
    )
