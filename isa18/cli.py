from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from isa18.runner import OUTPUT_FORMATS, run_file

PROG_NAME = "isa18"
DESCRIPTION = "18-bit instruction word encoder"
EPILOG = """\
Examples:
  isa18 program.asm
  isa18 --format binary --listing program.asm
  isa18 --registry opcodes.json program.asm
"""


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        metavar="PATH",
        type=Path,
        help="path to an assembly source file, one instruction per line",
    )
    parser.add_argument(
        "--registry",
        metavar="JSON",
        type=Path,
        help="load mnemonic formats and opcodes from a JSON file",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="octal",
        help="how to print encoded words (default: octal)",
    )
    parser.add_argument(
        "--listing",
        action="store_true",
        help="print each word next to its source line",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log rejected lines (-v) or every decoded field (-vv)",
    )

    args = parser.parse_args(argv)

    level = logging.ERROR
    if args.verbose == 1:
        level = logging.WARNING
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    return run_file(
        args.path,
        registry_path=args.registry,
        output_format=args.output_format,
        listing=args.listing,
    )


if __name__ == "__main__":
    sys.exit(main())
