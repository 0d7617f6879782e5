"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import image_stitcher.config as stitch_config
import image_stitcher.runtime as stitch_runtime
from image_stitcher.batch import run_batch
from image_stitcher.config_defaults import (
    DEFAULT_ALIGNMENT,
    DEFAULT_BINARY_PROPERTY,
    DEFAULT_FORMAT,
    DEFAULT_QUALITY,
)
from image_stitcher.errors import StitchError
from image_stitcher.logging_utils import logger
from image_stitcher.storage import InMemoryObjectStore, S3ObjectStore

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_stitcher.batch import BatchItem
    from image_stitcher.storage import ObjectStore


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog="image-stitcher",
        description=(
            "Stitch images from an S3/MinIO bucket into one vertical canvas"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "image-stitcher --config stitcher.toml --source-bucket scans "
            "--source-keys 'p1.png,p2.png'\n"
            "image-stitcher --config stitcher.toml --requests batch.toml "
            "--continue-on-fail\n"
            "image-stitcher --dry-run --local-dir ./pages --source-bucket "
            "local --source-keys 'a.png,b.png' --alignment center"
        ),
    )

    source = p.add_argument_group("source")
    source.add_argument(
        "--source-bucket", type=str, help="Bucket holding the source images",
        default=argparse.SUPPRESS)
    source.add_argument(
        "--source-keys", type=str,
        help="Comma- or newline-separated keys, stacked top to bottom",
        default=argparse.SUPPRESS)
    source.add_argument(
        "--requests", type=str,
        help="TOML file with an array of [[requests]] tables")

    layout = p.add_argument_group("layout")
    layout.add_argument(
        "--spacing", type=int, help="Vertical spacing between images (px)",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--alignment", choices=["left", "center", "right"],
        help=f"Horizontal alignment (default: {DEFAULT_ALIGNMENT})",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--no-normalize", dest="normalize_width", action="store_false",
        help="Keep source widths instead of resizing to a common width",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--target-width", type=int,
        help="Common width in px; 0 uses the widest source",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--no-upscale", dest="allow_upscale", action="store_false",
        help="Never enlarge images narrower than the target width",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--background-color", type=str,
        help="Hex color like #RRGGBB or #RRGGBBAA, or 'transparent'",
        default=argparse.SUPPRESS)

    encoding = p.add_argument_group("encoding")
    encoding.add_argument(
        "--format", choices=["png", "jpeg", "webp"],
        help=f"Output format (default: {DEFAULT_FORMAT})",
        default=argparse.SUPPRESS)
    encoding.add_argument(
        "--quality", type=int,
        help=f"JPEG/WEBP quality 1-100 (default: {DEFAULT_QUALITY})",
        default=argparse.SUPPRESS)

    destination = p.add_argument_group("destination")
    destination.add_argument(
        "--destination-bucket", type=str,
        help="Upload the result to this bucket",
        default=argparse.SUPPRESS)
    destination.add_argument(
        "--destination-key", type=str,
        help="Upload the result under this key",
        default=argparse.SUPPRESS)
    destination.add_argument(
        "--no-binary", dest="output_binary", action="store_false",
        help="Do not attach the encoded image to the result",
        default=argparse.SUPPRESS)
    destination.add_argument(
        "--binary-property", dest="binary_property_name", type=str,
        help=f"Result property for the image (default: "
             f"{DEFAULT_BINARY_PROPERTY})",
        default=argparse.SUPPRESS)

    processing = p.add_argument_group("processing")
    processing.add_argument(
        "--continue-on-fail", action="store_true",
        help="Record failed requests and keep going")
    processing.add_argument(
        "--fetch-workers", type=int,
        help="Threads used to fetch and decode sources",
        default=argparse.SUPPRESS)
    processing.add_argument(
        "--strict-colors", action="store_true",
        help="Reject malformed background colors instead of using white")

    output = p.add_argument_group("output")
    output.add_argument(
        "--output", type=str, help="Directory for stitched images",
        default=argparse.SUPPRESS)
    output.add_argument(
        "--dry-run", action="store_true",
        help="Read sources from --local-dir instead of the object store")
    output.add_argument(
        "--local-dir", type=str,
        help="Directory served as every source bucket in --dry-run mode")
    output.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging")

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str, help="Path to stitcher TOML config file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate config file and exit without stitching")
    cfg.add_argument(
        "--version", action="version",
        version=f"%(prog)s {stitch_runtime.resolve_project_version()}")

    return p


def apply_cli_overrides(
    cfg: stitch_config.StitcherConfig,
    args: argparse.Namespace,
) -> stitch_config.StitcherConfig:
    """Fold processing and output flags into the loaded config."""
    processing = cfg.processing.model_dump()
    if args.continue_on_fail:
        processing["continue_on_fail"] = True
    if args.strict_colors:
        processing["strict_colors"] = True
    if getattr(args, "fetch_workers", None) is not None:
        processing["fetch_workers"] = args.fetch_workers

    output = cfg.output.model_dump()
    if getattr(args, "output", None) is not None:
        output["output"] = args.output

    return cfg.model_copy(update={
        "processing": stitch_config.ProcessingConfig.model_validate(processing),
        "output": stitch_config.OutputConfig.model_validate(output),
    })


def collect_requests(args: argparse.Namespace) -> list[dict[str, Any]]:
    """Requests from ``--requests`` or from the individual flags."""
    if args.requests:
        return stitch_config.load_requests(args.requests)
    return [stitch_config.build_request_from_cli(vars(args))]


def _source_buckets(requests: Sequence[dict[str, Any]]) -> set[str]:
    buckets = set()
    for request in requests:
        bucket = request.get("source_bucket") or request.get("sourceBucket")
        if bucket:
            buckets.add(str(bucket))
    return buckets


def build_store(
    cfg: stitch_config.StitcherConfig,
    args: argparse.Namespace,
    requests: Sequence[dict[str, Any]],
) -> ObjectStore:
    """S3 store from config, or an in-memory store for ``--dry-run``."""
    if not args.dry_run:
        return S3ObjectStore.from_config(cfg.store)

    local_dir = Path(args.local_dir)
    store = InMemoryObjectStore()
    for bucket in _source_buckets(requests):
        seeded = InMemoryObjectStore.from_directory(bucket, local_dir)
        store.buckets.update(seeded.buckets)
    logger.info("Dry run: serving %s as source buckets", local_dir)
    return store


def log_parameters(
    cfg: stitch_config.StitcherConfig,
    args: argparse.Namespace,
    request_count: int,
) -> None:
    """Log the effective run settings."""
    if args.config:
        logger.info("Loaded config from: %s", args.config)
    if args.dry_run:
        logger.info("Object store: in-memory (dry run)")
    else:
        logger.info(
            "Object store: %s:%d (SSL %s)",
            cfg.store.endpoint,
            cfg.store.port,
            "Enabled" if cfg.store.use_ssl else "Disabled",
        )
    logger.info("Requests: %d", request_count)
    logger.info("Continue On Fail: %s",
                "Enabled" if cfg.processing.continue_on_fail else "Disabled")
    logger.info("Fetch Workers: %d", cfg.processing.fetch_workers)
    logger.info("Output Directory: %s", cfg.output.output)


def write_outputs(
    items: Sequence[BatchItem],
    cfg: stitch_config.StitcherConfig,
) -> None:
    """Save binary artifacts and print the result records as JSON."""
    if cfg.output.write_binary:
        output_dir = stitch_runtime.setup_output_directory(cfg.output.output)
        prefix_index = len(items) > 1
        for item in items:
            if item.ok:
                stitch_runtime.save_artifacts(
                    item.result,
                    output_dir,
                    item.index if prefix_index else None,
                )
    records = [item.to_dict(include_binary=False) for item in items]
    print(json.dumps(records, indent=2))  # noqa: T201


def run_from_args(args: argparse.Namespace) -> int:
    """Run the stitcher from parsed command-line arguments."""
    cfg = (
        stitch_config.ConfigLoader.load(args.config)
        if args.config
        else stitch_config.StitcherConfig.model_validate({})
    )
    if args.validate_config_only:
        logger.info("Config %s validated successfully.", args.config)
        return 0
    cfg = apply_cli_overrides(cfg, args)

    requests = collect_requests(args)
    log_parameters(cfg, args, len(requests))
    store = build_store(cfg, args, requests)

    try:
        items = run_batch(requests, store, processing=cfg.processing)
    except StitchError as exc:
        logger.error("Stitching aborted: %s", exc)
        return 1

    write_outputs(items, cfg)
    return 0 if all(item.ok for item in items) else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    if args.validate_config_only and not args.config:
        arg_parser.error("--validate-config-only requires --config")
    if args.dry_run and not args.local_dir:
        arg_parser.error("--dry-run requires --local-dir")
    if args.requests:
        ignored = stitch_config.build_request_from_cli(vars(args))
        if ignored:
            arg_parser.error(
                "--requests cannot be combined with request flags: "
                + ", ".join(sorted(ignored)))
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        return run_from_args(args)
    except (FileNotFoundError, ValueError) as exc:
        arg_parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
