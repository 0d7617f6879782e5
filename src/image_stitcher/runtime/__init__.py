"""Runtime utilities for validation, output and version helpers."""

from .output import artifact_path, save_artifacts, setup_output_directory
from .validation import validate_sources
from .version import resolve_project_version

__all__ = [
    "artifact_path",
    "resolve_project_version",
    "save_artifacts",
    "setup_output_directory",
    "validate_sources",
]
