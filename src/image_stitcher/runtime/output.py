"""Helpers for managing output locations and persisted artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from image_stitcher.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable

    from image_stitcher.type_defs import StitchResult

FALLBACK_OUTPUT_DIR = "image_stitcher_output"


def setup_output_directory(
    output_path: str,
    path_factory: Callable[[str], Path] = Path,
) -> Path:
    """
    Create the output directory if needed and return its resolved path.

    Falls back to ``image_stitcher_output`` on failure to create the
    desired directory to keep the run from aborting.
    """
    resolved_path = path_factory(output_path)
    try:
        resolved_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create output directory: %s", exc)
        fallback_path = path_factory(FALLBACK_OUTPUT_DIR)
        fallback_path.mkdir(parents=True, exist_ok=True)
        logger.info("Using fallback directory: %s", fallback_path)
        return fallback_path
    return resolved_path


def artifact_path(
    output_dir: Path,
    file_name: str,
    index: int | None = None,
) -> Path:
    """
    Return where an artifact is written inside ``output_dir``.

    Only the final component of ``file_name`` is used, so object keys
    with prefixes cannot escape the directory. ``index`` prefixes the
    name to keep batch outputs apart.
    """
    name = Path(file_name).name
    if index is not None:
        name = f"{index:03d}_{name}"
    return output_dir / name


def save_artifacts(
    result: StitchResult,
    output_dir: Path,
    index: int | None = None,
) -> list[Path]:
    """Write every binary artifact of ``result`` and return the paths."""
    saved: list[Path] = []
    for artifact in result.binary.values():
        path = artifact_path(output_dir, artifact.file_name, index)
        path.write_bytes(artifact.data)
        logger.info("Stitched image saved to: %s", path)
        saved.append(path)
    return saved
