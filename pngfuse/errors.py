"""Exception types raised by the PNGFuse engine."""

from __future__ import annotations

from pathlib import Path
from typing import Union

__all__ = [
    "FuseError",
    "InvalidFormatError",
    "CorruptChunkError",
    "CorruptPayloadError",
    "CompressionError",
    "DecompressionError",
    "IoError",
]


class FuseError(Exception):
    """Base class for every error surfaced by PNGFuse."""


class InvalidFormatError(FuseError, ValueError):
    """Raised when the input is not a PNG or has no image data run."""


class CorruptChunkError(FuseError, ValueError):
    """Raised when a chunk is truncated or its text layout is malformed."""


class CorruptPayloadError(FuseError, ValueError):
    """Raised when a merged sub-file payload cannot be split."""


class CompressionError(FuseError, RuntimeError):
    """Raised when zlib reports a failure while compressing."""


class DecompressionError(FuseError, ValueError):
    """Raised when a compressed stream is malformed or truncated."""


class IoError(FuseError, OSError):
    """Raised when a file cannot be read or written.

    The offending location is kept in :attr:`path`.
    """

    def __init__(self, message: str, path: Union[str, Path]) -> None:
        super().__init__(message)
        self.path = Path(path)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
