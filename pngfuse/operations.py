"""High level fuse / sunder / list / clean workflows over files on disk."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from config import OUTPUT_SETTINGS
from utils.fileio import ensure_path
from utils.logger import log_operation, setup_logger
from utils.validators import ValidationError, find_target_index, validate_output_options

from .errors import FuseError
from .subfile import SubFile
from .subfile_store import SubFileStore

__all__ = [
    "clean",
    "find_target",
    "fuse",
    "fused_output_path",
    "list_subfiles",
    "sunder",
    "unfused_output_path",
]

logger = setup_logger(__name__)

PathLike = Union[str, Path]


def find_target(paths: Sequence[PathLike]) -> Tuple[Path, List[Path]]:
    """Split *paths* into the first PNG and the files to fuse into it."""

    files = [ensure_path(path) for path in paths]
    index = find_target_index(files)
    if index is None:
        raise FuseError("Could not find a target PNG to fuse into.")
    target = files.pop(index)
    return target, files


def fused_output_path(target: PathLike) -> Path:
    """``image.png`` -> ``image.fused.png``."""

    target = ensure_path(target)
    return target.with_name(target.stem + OUTPUT_SETTINGS["fused_suffix"] + target.suffix)


def unfused_output_path(source: PathLike) -> Path:
    """``image.fused.png`` -> ``image.png``; anything else -> ``image.unfused.png``."""

    source = ensure_path(source)
    stem, suffix = source.stem, source.suffix
    fused_suffix = OUTPUT_SETTINGS["fused_suffix"]
    if stem.lower().endswith(fused_suffix):
        stem = stem[: -len(fused_suffix)]
    else:
        suffix = OUTPUT_SETTINGS["unfused_suffix"] + suffix
    return source.with_name(stem + suffix)


def _resolve_output(default: Path, source: Path, overwrite: bool, output: Optional[PathLike]) -> Path:
    check = validate_output_options(overwrite, output)
    if not check.valid:
        raise ValidationError(check.message)
    if output is not None:
        return ensure_path(output)
    return source if overwrite else default


@log_operation("Fuse")
def fuse(
    paths: Sequence[PathLike],
    *,
    overwrite: bool = False,
    output: Optional[PathLike] = None,
) -> Path:
    """Fuse every non-target file of *paths* into the first PNG listed.

    Returns:
        Path of the written image
    """
    target, files = find_target(paths)
    output_path = _resolve_output(fused_output_path(target), target, overwrite, output)

    store = SubFileStore.from_file(target)
    store.add_files(files)
    store.save(output_path)

    logger.info("Fused %d file(s) into %s -> %s", len(files), target, output_path)
    return output_path


@log_operation("Sunder")
def sunder(source: PathLike, *, output_dir: Optional[PathLike] = None) -> List[Path]:
    """Write every sub-file of *source* to *output_dir* (default: cwd)."""

    written = [sub_file.save(output_dir) for sub_file in list_subfiles(source)]
    logger.info("Extracted %d subfile(s) from %s", len(written), source)
    return written


def list_subfiles(source: PathLike) -> List[SubFile]:
    return SubFileStore.from_file(source).list_subfiles()


@log_operation("Clean")
def clean(
    source: PathLike,
    *,
    overwrite: bool = False,
    output: Optional[PathLike] = None,
) -> Tuple[int, Path]:
    """Remove all sub-files from *source* and save the result.

    Returns:
        ``(number of removed sub-files, path of the written image)``
    """
    source = ensure_path(source)
    output_path = _resolve_output(unfused_output_path(source), source, overwrite, output)

    store = SubFileStore.from_file(source)
    removed = store.remove_all_subfiles()
    store.save(output_path)

    logger.info("Removed %d subfile(s) from %s -> %s", removed, source, output_path)
    return removed, output_path
