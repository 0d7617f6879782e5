"""Resolve the version string reported by ``image-stitcher --version``."""

from __future__ import annotations

import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path

from image_stitcher.logging_utils import logger

DISTRIBUTION_NAME = "image-stitcher"
UNKNOWN_VERSION = "0.0.0"


def _installed_version() -> str | None:
    """Version of the installed distribution, if any."""
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return None


def _pyproject_version(start: Path) -> str | None:
    """Read ``project.version`` from the nearest pyproject.toml above start."""
    for parent in start.resolve().parents:
        pyproject_path = parent / "pyproject.toml"
        if not pyproject_path.is_file():
            continue
        try:
            with pyproject_path.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Error reading %s: %s", pyproject_path, exc)
            return None
        version = data.get("project", {}).get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
        return None
    return None


def resolve_project_version() -> str:
    """
    Return the installed version, else the source checkout's version.

    Falls back to ``0.0.0`` when running from an unpacked tree without
    a readable pyproject.toml.
    """
    return (
        _installed_version()
        or _pyproject_version(Path(__file__))
        or UNKNOWN_VERSION
    )
