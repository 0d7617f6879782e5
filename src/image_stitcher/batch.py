"""
Sequential batch driver with a continue-on-failure policy.

Each request runs on its own; the driver returns one item per request in
input order, either a :class:`StitchSuccess` or a :class:`StitchFailure`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from image_stitcher.config import ProcessingConfig, StitchRequest
from image_stitcher.errors import StitchError
from image_stitcher.logging_utils import logger
from image_stitcher.pipeline import stitch

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Mapping, Sequence

    from image_stitcher.imaging import ImagingBackend
    from image_stitcher.storage import ObjectStore
    from image_stitcher.type_defs import StitchResult


@dataclass(frozen=True, slots=True)
class StitchSuccess:
    """A request that produced a stitched image."""

    index: int
    result: StitchResult

    ok = True

    def to_dict(self, *, include_binary: bool = True) -> dict[str, Any]:
        """Render the result record."""
        return self.result.to_dict(include_binary=include_binary)


@dataclass(frozen=True, slots=True)
class StitchFailure:
    """A request that failed; kept at its position in the batch."""

    index: int
    error: StitchError

    ok = False

    def to_dict(self, *, include_binary: bool = True) -> dict[str, Any]:  # noqa: ARG002
        """Render the error placeholder record."""
        return {
            "error": str(self.error),
            "errorType": type(self.error).__name__,
            "pairedItem": self.index,
        }


BatchItem = StitchSuccess | StitchFailure


def run_batch(
    requests: Sequence[StitchRequest | Mapping[str, Any]],
    store: ObjectStore,
    backend: ImagingBackend | None = None,
    *,
    processing: ProcessingConfig | None = None,
) -> list[BatchItem]:
    """
    Stitch ``requests`` one at a time in input order.

    With ``processing.continue_on_fail`` a failing request becomes a
    :class:`StitchFailure` and the batch carries on. Otherwise the error
    is re-raised immediately with ``item_index`` set to its position.
    """
    policy = processing or ProcessingConfig.model_validate({})
    items: list[BatchItem] = []
    for index, request in enumerate(requests):
        try:
            result = stitch(
                request,
                store,
                backend,
                fetch_workers=policy.fetch_workers,
                strict_colors=policy.strict_colors,
            )
        except StitchError as exc:
            if not policy.continue_on_fail:
                exc.item_index = index
                raise
            logger.warning("Request %d failed: %s", index, exc)
            items.append(StitchFailure(index=index, error=exc))
            continue
        items.append(StitchSuccess(index=index, result=result))

    failed = sum(1 for item in items if not item.ok)
    logger.info(
        "Batch finished: %d succeeded, %d failed", len(items) - failed, failed,
    )
    return items
