"""In-memory PNG chunk store that splices chunks in after the image data."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from config import CONCURRENCY_SETTINGS
from utils.fileio import read_file, write_file
from utils.logger import setup_logger

from .buffer import CodecBuffer
from .chunks import CHUNK_OVERHEAD, PNG_SIGNATURE, ChunkKind, read_chunk_header
from .errors import CorruptChunkError, InvalidFormatError

__all__ = ["ChunkInfo", "ChunkStore"]

logger = setup_logger(__name__)

IDAT = b"IDAT"
IEND = b"IEND"

K = TypeVar("K", bound=ChunkKind)


@dataclass(frozen=True)
class ChunkInfo:
    """Location of one chunk inside the image buffer."""

    offset: int
    length: int
    chunk_type: bytes

    @property
    def end(self) -> int:
        return self.offset + CHUNK_OVERHEAD + self.length


class ChunkStore:
    """
    Raw PNG byte stream with chunk-level insert, enumerate and delete.

    New chunks are always inserted right after the contiguous run of ``IDAT``
    chunks, so viewers do not have to buffer them before decoding pixels.
    Enumeration and deletion cover the whole stream, from the first chunk
    after the signature to the end of the buffer, ``IEND`` included.

    The store owns its buffer. Structural operations are not thread-safe and
    must not overlap.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], *, source: Optional[Union[str, Path]] = None):
        """
        Args:
            data: Complete PNG file contents
            source: Where *data* came from, used in error messages only
        """
        self.source = Path(source) if source is not None else None
        self.image = bytearray(data)
        if not self.image.startswith(PNG_SIGNATURE):
            name = str(self.source) if self.source is not None else "Input"
            raise InvalidFormatError(f"{name} is not a valid PNG file.")
        self._idat_end = self._find_idat_end()
        logger.debug("Loaded %d bytes, insertion offset %d", len(self.image), self._idat_end)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ChunkStore":
        return cls(read_file(path), source=path)

    @property
    def insertion_offset(self) -> int:
        """Offset just past the last ``IDAT`` chunk of the image data run."""
        return self._idat_end

    def __len__(self) -> int:
        return len(self.image)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------
    def _checked_end(self, offset: int, length: int, chunk_type: bytes) -> int:
        end = offset + CHUNK_OVERHEAD + length
        if end > len(self.image):
            remaining = len(self.image) - offset - CHUNK_OVERHEAD
            raise CorruptChunkError(
                f"Chunk {chunk_type!r} at offset {offset} declares {length} bytes "
                f"but only {max(remaining, 0)} remain"
            )
        return end

    def _find_idat_end(self) -> int:
        offset = len(PNG_SIGNATURE)
        size = len(self.image)
        in_run = False
        while offset < size:
            length, chunk_type = read_chunk_header(self.image, offset)
            if chunk_type == IDAT:
                in_run = True
            elif in_run or chunk_type == IEND:
                break
            offset = self._checked_end(offset, length, chunk_type)

        if not in_run:
            name = str(self.source) if self.source is not None else "Input"
            raise InvalidFormatError(f"{name} has no IDAT chunk.")
        return offset

    def iter_chunks(self) -> Iterator[ChunkInfo]:
        """Yield every chunk from the signature to the end of the buffer.

        Chunks stored after ``IEND`` are included.

        Raises :class:`CorruptChunkError` on a chunk that runs past the end of
        the buffer. CRCs are not verified.
        """
        offset = len(PNG_SIGNATURE)
        size = len(self.image)
        while offset < size:
            length, chunk_type = read_chunk_header(self.image, offset)
            end = self._checked_end(offset, length, chunk_type)
            yield ChunkInfo(offset, length, chunk_type)
            offset = end

    # ------------------------------------------------------------------
    # Queries and mutations
    # ------------------------------------------------------------------
    def enumerate(self, kind: Type[K]) -> List[K]:
        """Decode every chunk accepted by ``kind.is_valid``, in stream order.

        Each result owns a copy of its data. The first chunk that fails to
        decode aborts the whole enumeration.
        """
        found: List[K] = []
        with memoryview(self.image) as view:
            for info in self.iter_chunks():
                if kind.is_valid(view[info.offset : info.end]):
                    found.append(kind.decode(bytes(view[info.offset : info.end])))
        return found

    def _splice(self, encoded: CodecBuffer) -> None:
        offset = self._idat_end
        self.image[offset:offset] = encoded.view()

    def insert(self, chunk: ChunkKind) -> None:
        """Encode *chunk* and insert it at the insertion offset."""
        with chunk.encode() as encoded:
            self._splice(encoded)
            logger.debug("Inserted %d byte %r chunk at offset %d", len(encoded), chunk.chunk_type, self._idat_end)

    def insert_many(self, chunks: Iterable[ChunkKind]) -> None:
        """Encode *chunks* concurrently and insert them in their given order.

        Nothing is inserted unless every chunk encodes successfully.
        """
        chunks = list(chunks)
        if not chunks:
            return
        if len(chunks) == 1:
            self.insert(chunks[0])
            return

        workers = max(1, min(len(chunks), CONCURRENCY_SETTINGS.get("max_workers", 8)))
        with ExitStack() as stack:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pngfuse-encode") as pool:
                futures = [pool.submit(chunk.encode) for chunk in chunks]

            for future in futures:
                if future.exception() is None:
                    stack.enter_context(future.result())
            # Raises the first failure in input order
            encoded = [future.result() for future in futures]

            # Every splice lands at the same offset, in front of the previous
            # one, so splicing in reverse leaves the chunks in input order.
            for buffer in reversed(encoded):
                self._splice(buffer)

        logger.debug("Inserted %d chunks at offset %d", len(chunks), self._idat_end)

    def delete_all(self, kind: Type[ChunkKind]) -> int:
        """Remove every chunk accepted by ``kind.is_valid``.

        Returns:
            Number of chunks removed
        """
        ranges: List[Tuple[int, int]] = []
        range_start: Optional[int] = None
        scan_end = len(PNG_SIGNATURE)
        count = 0

        with memoryview(self.image) as view:
            for info in self.iter_chunks():
                if kind.is_valid(view[info.offset : info.end]):
                    count += 1
                    if range_start is None:
                        range_start = info.offset
                elif range_start is not None:
                    ranges.append((range_start, info.offset))
                    range_start = None
                scan_end = info.end
        if range_start is not None:
            ranges.append((range_start, scan_end))

        # Back-to-front keeps the offsets of the remaining ranges valid
        for start, end in reversed(ranges):
            del self.image[start:end]
            if end <= self._idat_end:
                self._idat_end -= end - start

        logger.debug("Deleted %d chunks in %d ranges", count, len(ranges))
        return count

    def serialize(self) -> bytes:
        return bytes(self.image)

    def save(self, path: Union[str, Path]) -> None:
        write_file(path, self.image)
