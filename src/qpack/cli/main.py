"""Main CLI entry point for qpack."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .. import __version__
from ..codec import decode, encode
from ..exceptions import QPackError
from ..models.options import UnpackOptions
from .analyze import inspect_bytes

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the qpack CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="qpack",
        description="qpack: compact binary serialization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qpack --encode '{"a": 1, "b": [2, 3]}'    Print the hex encoding of a JSON document
  qpack --decode f98361018362f10203 --text  Decode hex, raw values as UTF-8 text
  qpack --inspect f98361018362f10203        Show the encoding tag by tag
  qpack --version                           Show version
        """,
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--encode",
        metavar="JSON",
        type=str,
        help="Encode a JSON document and print it as hex",
    )
    action.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode a hex encoded qpack value and print it",
    )
    action.add_argument(
        "--inspect",
        metavar="HEX",
        type=str,
        help="Show a tag-by-tag breakdown of hex encoded qpack data",
    )

    parser.add_argument(
        "--text",
        action="store_true",
        help="With --decode, return raw values as UTF-8 text",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"qpack {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.encode is not None:
            print(encode(json.loads(args.encode)).hex())
            return 0

        if args.decode is not None:
            options = UnpackOptions(decode="utf-8") if args.text else None
            print(repr(decode(bytes.fromhex(args.decode), options=options)))
            return 0

        if args.inspect is not None:
            inspect_bytes(bytes.fromhex(args.inspect))
            return 0
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON: {e}", file=sys.stderr)
        return 1
    except (QPackError, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
