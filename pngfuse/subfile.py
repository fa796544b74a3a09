"""Sub-files and the private ``fuSe`` chunk that carries them.

A sub-file is serialized ("merged") as ``filename NUL contents`` with the
filename encoded in UTF-8. The merged form is stored as the value of a
``fuSe`` chunk, which follows the ``zTXt`` layout with the fixed keyword
``PNGFuse``::

    PNGFuse NUL 0x00 zlib(filename NUL contents)

Unlike ``zTXt`` the value is arbitrary binary data rather than Latin-1 text.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional, Union

from utils.fileio import ensure_path, read_file, write_file

from .chunks import TextChunk
from .errors import CorruptPayloadError

__all__ = [
    "FUSE_CHUNK_TYPE",
    "FUSE_KEYWORD",
    "FuseChunk",
    "SubFile",
    "merge",
    "split",
]

FUSE_CHUNK_TYPE = b"fuSe"
FUSE_KEYWORD = b"PNGFuse"


def merge(filename: str, contents: Union[bytes, bytearray, memoryview]) -> bytes:
    """Return the merged representation ``filename NUL contents``."""

    merged = bytearray(filename.encode("utf-8"))
    merged += b"\0"
    merged += contents
    return bytes(merged)


def split(data: Union[bytes, bytearray, memoryview]) -> "SubFile":
    """Parse a merged payload back into a :class:`SubFile`."""

    data = bytes(data)
    end_of_filename = data.find(b"\0")
    if end_of_filename == -1:
        raise CorruptPayloadError("Subfile payload has no filename separator")
    try:
        filename = data[:end_of_filename].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptPayloadError("Subfile name is not valid UTF-8") from exc
    return SubFile(filename, data[end_of_filename + 1 :])


@dataclass(frozen=True)
class SubFile:
    """A named file carried inside a PNG."""

    name: str
    contents: bytes

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SubFile":
        """Load *path*; only its final component is kept as the name."""
        source = ensure_path(path)
        return cls(source.name, read_file(source))

    @classmethod
    def from_merged(cls, data: Union[bytes, bytearray, memoryview]) -> "SubFile":
        return split(data)

    def merged(self) -> bytes:
        return merge(self.name, self.contents)

    def save(self, directory: Optional[Union[str, Path]] = None) -> Path:
        """Write the contents under *directory* (default: current directory).

        Only the final component of :attr:`name` is used, so a stored name
        cannot point outside *directory*.
        """
        target_dir = ensure_path(directory) if directory is not None else Path.cwd()
        safe_name = Path(self.name.replace("\\", "/")).name
        if safe_name in ("", ".", ".."):
            raise CorruptPayloadError(f"Subfile name {self.name!r} does not name a file")
        destination = target_dir / safe_name
        write_file(destination, self.contents)
        return destination


@dataclass(frozen=True)
class FuseChunk(TextChunk):
    """``zTXt``-style private chunk holding one merged sub-file."""

    key: bytes = FUSE_KEYWORD
    value: bytes = b""

    chunk_type: ClassVar[bytes] = FUSE_CHUNK_TYPE

    @classmethod
    def from_subfile(cls, sub_file: SubFile) -> "FuseChunk":
        return cls(key=FUSE_KEYWORD, value=sub_file.merged())

    def to_subfile(self) -> SubFile:
        return split(self.value)

    @classmethod
    def is_valid(cls, chunk) -> bool:
        """Match the type tag and the keyword at the start of the chunk data.

        The separator and compression method are left to :meth:`decode`.
        """
        keyword_end = 8 + len(FUSE_KEYWORD)
        return (
            super().is_valid(chunk)
            and len(chunk) >= keyword_end
            and chunk[8:keyword_end] == FUSE_KEYWORD
        )
