"""Validation helpers shared by the file workflows and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from config import OUTPUT_SETTINGS
from pngfuse.errors import FuseError
from utils.fileio import ensure_path

PNG_EXTENSION = OUTPUT_SETTINGS["png_extension"]


class ValidationError(FuseError, ValueError):
    """Raised when user supplied options cannot be used together."""


@dataclass(frozen=True)
class ValidationResult:
    """Simple structure describing a validation outcome."""

    valid: bool
    message: str = ""


def is_png_path(path: Union[str, Path]) -> bool:
    """Return ``True`` when *path* has a ``.png`` extension, in any case."""

    return ensure_path(path).suffix.lower() == PNG_EXTENSION


def find_target_index(paths: Iterable[Union[str, Path]]) -> Optional[int]:
    """Return the index of the first PNG in *paths*, or ``None``."""

    for index, path in enumerate(paths):
        if is_png_path(path):
            return index
    return None


def validate_output_options(overwrite: bool, output: Optional[Union[str, Path]]) -> ValidationResult:
    """Check that ``overwrite`` and a custom ``output`` are not combined."""

    if overwrite and output is not None:
        return ValidationResult(False, "Cannot specify both overwrite mode and a custom output path.")
    return ValidationResult(True, "OK")


__all__ = [
    "ValidationError",
    "ValidationResult",
    "find_target_index",
    "is_png_path",
    "validate_output_options",
]
