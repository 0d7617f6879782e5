"""
Exception taxonomy for stitch requests and object-store adapters.

Every stage failure is raised as a :class:`StitchError` subclass so the
batch driver can record or re-raise it with the failing request's
position attached.
"""

from __future__ import annotations


class StitchError(Exception):
    """Base class for failures scoped to one stitch request."""

    def __init__(self, message: str, *, item_index: int | None = None) -> None:
        super().__init__(message)
        self.item_index = item_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.item_index is None:
            return message
        return f"{message} [item {self.item_index}]"


class ValidationError(StitchError):
    """The request is missing a bucket or keys, or a field is invalid."""


class FetchError(StitchError):
    """A source object could not be read from the store."""


class DecodeError(StitchError):
    """Image metadata could not be read from a source buffer."""


class EncodeError(StitchError):
    """The canvas could not be allocated, composited or serialized."""


class PublishError(StitchError):
    """The stitched image could not be written back to the store."""


class StoreError(Exception):
    """Base class for errors raised by object-store adapters."""


class ObjectNotFoundError(StoreError):
    """The requested bucket or key does not exist."""


class TransportError(StoreError):
    """The store could not be reached or rejected the call."""
