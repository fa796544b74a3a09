"""Whole-file reads and writes with errors that carry the offending path."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pngfuse.errors import IoError

__all__ = ["ensure_path", "read_file", "write_file"]


def ensure_path(path: Union[str, Path]) -> Path:
    if isinstance(path, Path):
        return path
    return Path(path)


def read_file(path: Union[str, Path]) -> bytes:
    """Return the full contents of *path*."""

    source = ensure_path(path)
    try:
        return source.read_bytes()
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise IoError(f"Could not open input file {source}. ({reason})", source) from exc


def write_file(path: Union[str, Path], data: Union[bytes, bytearray, memoryview]) -> None:
    """Write *data* to *path*, replacing any existing file."""

    destination = ensure_path(path)
    try:
        destination.write_bytes(data)
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise IoError(f"Could not open output file {destination}. ({reason})", destination) from exc
