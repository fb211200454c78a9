"""Command-line entry point: ABI JSON in, Solidity interface out."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .api import generate_solidity
from .errors import AbiSolError
from .options import GenerateOptions, GenerationMode
from . import constants

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.PACKAGE_NAME,
        description="Generate a Solidity interface from a contract ABI",
    )
    parser.add_argument("file", nargs="?", help="ABI JSON file (default: stdin)")
    parser.add_argument(
        "--name",
        "-n",
        default=constants.DEFAULT_INTERFACE_NAME,
        help=f"Interface name (default: {constants.DEFAULT_INTERFACE_NAME})",
    )
    parser.add_argument(
        "--solidity-version",
        "-V",
        default=constants.DEFAULT_SOLIDITY_VERSION,
        help=f"Solidity version range (default: {constants.DEFAULT_SOLIDITY_VERSION!r})",
    )
    parser.add_argument(
        "--license",
        "-L",
        default=constants.DEFAULT_LICENSE,
        help=f"SPDX license identifier (default: {constants.DEFAULT_LICENSE})",
    )
    parser.add_argument(
        "--embedded",
        action="store_true",
        help="Emit only the interface, for splicing into another file",
    )
    parser.add_argument(
        "--no-attribution",
        action="store_true",
        help="Omit the autogenerated-by comment",
    )
    parser.add_argument(
        "--no-source",
        action="store_true",
        help="Omit the trailing comment that echoes the input ABI",
    )
    parser.add_argument(
        "--prettify",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reformat output with forge fmt (default: when available)",
    )
    parser.add_argument("--output", "-o", help="Write to this file instead of stdout")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable info logging"
    )
    return parser


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    options = GenerateOptions(
        name=args.name,
        solidity_version=args.solidity_version,
        license=args.license,
        mode=GenerationMode.EMBEDDED if args.embedded else GenerationMode.NORMAL,
        output_attribution=not args.no_attribution,
        output_source=not args.no_source,
        prettify_output=args.prettify,
    )

    try:
        output = generate_solidity(_read_input(args.file), options)
    except (AbiSolError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
