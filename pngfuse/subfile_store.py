"""File-level access to the sub-files fused into a PNG."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from utils.fileio import read_file
from utils.logger import setup_logger

from .chunk_store import ChunkStore
from .subfile import FuseChunk, SubFile

__all__ = ["SubFileStore"]

logger = setup_logger(__name__)


class SubFileStore:
    """Adds, lists and removes ``fuSe`` sub-files of a single PNG image."""

    def __init__(self, data: Union[bytes, bytearray, memoryview], *, source=None) -> None:
        self.chunks = ChunkStore(data, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SubFileStore":
        return cls(read_file(path), source=path)

    @property
    def source(self):
        return self.chunks.source

    def add(self, file_name: str, contents: bytes) -> None:
        self.chunks.insert(FuseChunk.from_subfile(SubFile(file_name, contents)))

    def add_many(self, files: Iterable[Tuple[str, bytes]]) -> None:
        """Add several sub-files at once, keeping their order in the image."""
        chunks = [FuseChunk.from_subfile(SubFile(name, contents)) for name, contents in files]
        self.chunks.insert_many(chunks)

    def add_file(self, path: Union[str, Path]) -> None:
        sub_file = SubFile.from_file(path)
        self.add(sub_file.name, sub_file.contents)

    def add_files(self, paths: Sequence[Union[str, Path]]) -> None:
        """Load and add files from disk; several files are encoded in parallel."""
        paths = list(paths)
        if len(paths) == 1:
            self.add_file(paths[0])
            return
        sub_files = [SubFile.from_file(path) for path in paths]
        self.add_many((sub_file.name, sub_file.contents) for sub_file in sub_files)
        logger.debug("Added %d subfiles", len(sub_files))

    def list_subfiles(self) -> List[SubFile]:
        return [chunk.to_subfile() for chunk in self.chunks.enumerate(FuseChunk)]

    def remove_all_subfiles(self) -> int:
        return self.chunks.delete_all(FuseChunk)

    def serialize(self) -> bytes:
        return self.chunks.serialize()

    def save(self, path: Union[str, Path]) -> None:
        self.chunks.save(path)
