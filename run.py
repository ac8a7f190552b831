"""Command-line entry point for the LC-3 virtual machine."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from lc3vm.ui.app import AppConfig, LC3App


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lc3vm",
        description="LC-3 virtual machine",
    )
    parser.add_argument(
        "images",
        nargs="+",
        type=Path,
        metavar="IMAGE",
        help="Object image(s) to load; later images overwrite earlier ones",
    )
    parser.add_argument(
        "--origin-entry",
        action="store_true",
        help="Start at the first image's origin instead of x3000",
    )
    parser.add_argument(
        "--no-strict",
        action="store_true",
        help="Ignore undefined operand bits instead of faulting",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    for image in args.images:
        if not image.exists():
            parser.error(f"image file not found: {image}")

    config = AppConfig(
        image_paths=args.images,
        start_at_origin=args.origin_entry,
        strict_operands=not args.no_strict,
    )
    app = LC3App(config)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
