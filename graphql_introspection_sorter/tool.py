#!/usr/bin/env python
# Copyright 2026-present Kensho Technologies, LLC.
"""Utility modeled after json.tool, canonicalizes a GraphQL introspection response.

Reads the JSON response to an introspection query from a file or standard input, and writes
the canonicalized response to a file or standard output. Useful for committing schema
snapshots under version control.

Used as: python -m graphql_introspection_sorter.tool [INPUT] [-o OUTPUT] [--indent N]
"""
import argparse
import logging
import sys
from typing import BinaryIO, Optional, Sequence

from . import __version__, sort_introspection_payload
from .exceptions import IntrospectionSorterError
from .fingerprint import compute_introspection_fingerprint


logger = logging.getLogger(__name__)


def _make_argument_parser() -> argparse.ArgumentParser:
    """Describe the command line interface of the tool."""
    parser = argparse.ArgumentParser(
        prog="python -m graphql_introspection_sorter.tool",
        description=(
            "Canonicalize the JSON response to a GraphQL introspection query, so that an "
            "unchanged schema always serializes to the same bytes."
        ),
    )
    parser.add_argument(
        "infile",
        nargs="?",
        help="file holding the introspection response, standard input if omitted",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="outfile",
        help="file to write the result to, standard output if omitted",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="pretty-print the output with this many spaces per level, compact if omitted",
    )
    parser.add_argument(
        "--fingerprint",
        action="store_true",
        help="output the sha256 fingerprint of the canonical schema instead of the response",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log progress and data-quality warnings"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_input(infile: Optional[str]) -> bytes:
    """Read the raw payload from the given path, or from standard input."""
    if infile is None:
        return sys.stdin.buffer.read()
    with open(infile, "rb") as f:
        return f.read()


def _write_output(outfile: Optional[str], content: bytes) -> None:
    """Write the result to the given path, or to standard output."""
    if outfile is None:
        stream: BinaryIO = sys.stdout.buffer
        stream.write(content)
        stream.flush()
        return
    with open(outfile, "wb") as f:
        f.write(content)


def main(args: Optional[Sequence[str]] = None) -> None:
    """Canonicalize the introspection response named on the command line."""
    parsed_args = _make_argument_parser().parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        raw_payload = _read_input(parsed_args.infile)
    except OSError as e:
        logger.error("Could not read the introspection response: %s", e)
        sys.exit(1)

    try:
        if parsed_args.fingerprint:
            result = (compute_introspection_fingerprint(raw_payload) + "\n").encode("utf-8")
        else:
            result = sort_introspection_payload(raw_payload, indent=parsed_args.indent)
    except IntrospectionSorterError as e:
        logger.error("Could not canonicalize the introspection response: %s", e)
        sys.exit(1)

    _write_output(parsed_args.outfile, result)
    logger.info("Wrote %d bytes.", len(result))


if __name__ == "__main__":
    main()
