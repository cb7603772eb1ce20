"""Command-line entry point printing a CDN image URL."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

import structlog

from image_handler_client.cdn import Cdn
from image_handler_client.config import CdnSettings

logger: logging.Logger = logging.getLogger(__name__)


def _edits(value: str) -> dict[str, object]:
    """Parse the ``--edits`` argument as a JSON object."""
    try:
        edits = json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc
    if not isinstance(edits, dict):
        raise argparse.ArgumentTypeError("edits must be a JSON object")
    return edits


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="image_handler_client",
        description="Build a CDN image URL with sharp edits for the AWS Serverless Image Handler.",
    )
    parser.add_argument("uri", help="file URI or full URL of the image")
    parser.add_argument(
        "--edits",
        type=_edits,
        default={},
        help='sharp edits as a JSON object, e.g. \'{"resize": {"width": 800}}\'',
    )
    parser.add_argument("--bucket", help="bucket overriding the configured one")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Print the image URL of ``uri`` using settings from the environment."""
    args = build_parser().parse_args(argv)
    settings = CdnSettings.load()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level)
        )
    )
    logger.info("cdn_url_requested", extra={"uri": args.uri})
    print(Cdn.from_settings(settings).get_url(args.uri, args.edits, bucket=args.bucket))
    return 0


if __name__ == "__main__":
    sys.exit(main())
