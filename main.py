"""Entry point module for the PNGFuse command line tool."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Optional

from config import APP_DESCRIPTION, APP_NAME, APP_VERSION
from utils.logger import setup_logger

logger = setup_logger(__name__)

EPILOG = (
    "Specify multiple files to perform a fusion into the first PNG listed, "
    "or specify a single fused PNG to extract its subfiles (without removing them)."
)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``pngfuse``."""

    parser = argparse.ArgumentParser(
        prog="pngfuse",
        description=f"{APP_DESCRIPTION}. v{APP_VERSION}",
        epilog=EPILOG,
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} v{APP_VERSION}")
    parser.add_argument(
        "files",
        nargs="*",
        metavar="file",
        help="fuse-host.png followed by files to fuse into it, or fused PNGs to read",
    )
    parser.add_argument("-l", "--list", action="store_true", help="list the subfiles present in a fused PNG")
    parser.add_argument(
        "-c",
        "-r",
        "--clean",
        "--remove",
        dest="clean",
        action="store_true",
        help="remove all subfiles from a fused PNG",
    )
    parser.add_argument(
        "-m",
        "--overwrite",
        "--modify",
        dest="overwrite",
        action="store_true",
        help="modify the input files when fusing or cleaning instead of creating new ones",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="custom output path for the result of a fuse or clean operation",
    )
    return parser


def parse_arguments(argv: Optional[Iterable[str]] = None):
    """Return parsed command line arguments."""

    return build_parser().parse_args(args=list(argv) if argv is not None else None)


def run_cli(args) -> int:
    """Execute the command described by *args* and return the exit status."""

    from cli import FuseCLI

    cli = FuseCLI(args)
    return 0 if cli.run() else 1


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Main entry point used by the ``pngfuse`` console script."""

    args = parse_arguments(argv)
    return run_cli(args)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
