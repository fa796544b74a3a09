"""Command dispatcher for the PNGFuse command line tool.

The behaviour mirrors the classic ``pngfuse`` tool: several files fuse into the
first PNG listed, a single file is split back into its subfiles, and
``--list`` / ``--clean`` inspect or strip every file given.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from pngfuse import operations
from pngfuse.errors import FuseError
from utils.logger import log_operation, setup_logger
from utils.validators import ValidationError, validate_output_options

logger = setup_logger(__name__)


class FuseCLI:
    """CLI dispatcher for PNGFuse."""

    def __init__(self, args, parser=None) -> None:
        self.args = args
        self._parser = parser

    @property
    def parser(self):
        if self._parser is None:
            from main import build_parser  # Lazy import to avoid circular dependency.

            self._parser = build_parser()
        return self._parser

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def run(self) -> bool:
        try:
            self._dispatch()
        except FuseError as exc:
            log_operation(logger, "CLI", status="FAILED", details=exc)
            print(f"Error: {exc}", file=sys.stderr)
            self._print_usage(sys.stderr)
            return False
        except KeyboardInterrupt:
            print("Operation cancelled by user.", file=sys.stderr)
            return False
        except Exception as exc:  # pragma: no cover - unexpected failure
            logger.exception("Unhandled CLI exception")
            print(f"Unexpected error: {exc}", file=sys.stderr)
            return False

        return True

    def _print_usage(self, stream: TextIO) -> None:
        self.parser.print_usage(stream)

    def _dispatch(self) -> None:
        args = self.args
        files: List[Path] = [Path(name) for name in (args.files or [])]
        output = Path(args.output) if args.output else None

        check = validate_output_options(args.overwrite, output)
        if not check.valid:
            raise ValidationError(check.message)

        if not files:
            self.parser.print_help()
            return

        if not (args.list or args.clean):
            if len(files) == 1:
                self._handle_sunder(files[0])
            else:
                self._handle_fuse(files, output)
            return

        for file in files:
            if len(files) > 1:
                # Context for which of several files is being listed or cleaned
                print(f"{file.name}:")
            if args.list:
                self._handle_list(file)
            if args.clean:
                self._handle_clean(file, output)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _handle_fuse(self, files: List[Path], output: Optional[Path]) -> None:
        result = operations.fuse(files, overwrite=self.args.overwrite, output=output)
        print(f"Saved  : {result}")

    def _handle_sunder(self, source: Path) -> None:
        for path in operations.sunder(source):
            print(f"Extracted : {path}")

    def _handle_list(self, source: Path) -> None:
        for sub_file in operations.list_subfiles(source):
            print(f"{sub_file.name} : {len(sub_file.contents)} bytes")

    def _handle_clean(self, source: Path, output: Optional[Path]) -> None:
        removed, result = operations.clean(source, overwrite=self.args.overwrite, output=output)
        print(f"{removed} subfile{'' if removed == 1 else 's'} removed.")
        logger.debug("Cleaned image written to %s", result)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point used by unit tests."""

    from main import parse_arguments  # Lazy import to avoid circular dependency.

    args = parse_arguments(list(argv) if argv is not None else None)
    cli = FuseCLI(args)
    return 0 if cli.run() else 1


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    sys.exit(main(sys.argv[1:]))
