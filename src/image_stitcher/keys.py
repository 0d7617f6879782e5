"""Parsing of the request's source key list."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from image_stitcher.constants import KEY_SEPARATOR_PATTERN

_SEPARATOR_RE = re.compile(KEY_SEPARATOR_PATTERN)


def _clean(values: Iterable[Any]) -> list[str]:
    """Trim every entry and drop the empty ones, keeping order."""
    stripped = (str(value).strip() for value in values)
    return [value for value in stripped if value]


def split_keys(text: str) -> list[str]:
    """Split a newline- or comma-separated string into keys."""
    return _clean(_SEPARATOR_RE.split(text))


def parse_source_keys(value: Any) -> list[str]:
    """
    Normalize a key list supplied as a string, sequence, or wrapper.

    Accepted shapes:
        - ``"a.png,b.png"`` or one key per line
        - ``["a.png", "b.png"]`` (entries coerced with ``str``)
        - a mapping with a ``keys`` sequence, e.g. ``{"keys": [...]}``

    Anything else that is not ``None`` is coerced to a string and split.
    Order and duplicates are preserved; the result may be empty, the
    caller decides whether that is an error.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return split_keys(value)
    if isinstance(value, Mapping):
        wrapped = value.get("keys")
        if isinstance(wrapped, (list, tuple)):
            return _clean(wrapped)
        return split_keys(str(value))
    if isinstance(value, (list, tuple)):
        return _clean(value)
    return split_keys(str(value))
