"""Command that creates an erased flash image and starts the FTL on it."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from .device import create_flash_file
from .ftl import FlashTranslationLayer
from .geometry import Geometry


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flashftl",
        description="Create an erased flash device image and open the FTL on it.",
    )
    parser.add_argument(
        "image", nargs="?", default="flashmemory", help="path of the device image"
    )
    parser.add_argument(
        "--pages-per-block", type=int, default=Geometry.pages_per_block
    )
    parser.add_argument("--blocks", type=int, default=Geometry.blocks_per_device)
    parser.add_argument(
        "--show",
        action="store_true",
        help="print the mapping table and free block list",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    try:
        geometry = Geometry(
            pages_per_block=args.pages_per_block, blocks_per_device=args.blocks
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        device = create_flash_file(args.image, geometry)
    except OSError:
        print("file open error")
        return 1

    try:
        with FlashTranslationLayer(device) as ftl:
            if args.show:
                sys.stdout.write(ftl.format_mapping())
                sys.stdout.write(ftl.format_free_blocks())
    finally:
        device.fileobj.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())