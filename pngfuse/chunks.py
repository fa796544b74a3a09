"""PNG chunk wire format and the generic ``zTXt`` text chunk codec."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import ClassVar, Protocol, Tuple, Union

from .buffer import CodecBuffer
from .compression import compress_buffer, decompress
from .errors import CorruptChunkError

__all__ = [
    "PNG_SIGNATURE",
    "CHUNK_OVERHEAD",
    "ChunkKind",
    "TextChunk",
    "build_chunk",
    "read_chunk_header",
]

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_CHUNK_HEADER = struct.Struct(">I4s")
_CRC_STRUCT = struct.Struct(">I")
CHUNK_OVERHEAD = _CHUNK_HEADER.size + _CRC_STRUCT.size
"""Bytes a chunk occupies in addition to its data (length, type and CRC)."""

MAX_KEYWORD_LENGTH = 79

BytesLike = Union[bytes, bytearray, memoryview]


class ChunkKind(Protocol):
    """Capabilities a chunk handler needs to be stored in a :class:`ChunkStore`.

    ``is_valid`` and ``decode`` receive the full encoded chunk, header and CRC
    included. ``decode`` must return an object that owns its data.
    """

    chunk_type: ClassVar[bytes]

    def encode(self) -> CodecBuffer:
        ...

    @classmethod
    def decode(cls, chunk: BytesLike) -> "ChunkKind":
        ...

    @classmethod
    def is_valid(cls, chunk: BytesLike) -> bool:
        ...


def read_chunk_header(chunk: BytesLike, offset: int = 0) -> Tuple[int, bytes]:
    """Return ``(length, chunk_type)`` of the chunk starting at *offset*."""

    if offset + _CHUNK_HEADER.size > len(chunk):
        raise CorruptChunkError(f"Truncated chunk header at offset {offset}")
    length, chunk_type = _CHUNK_HEADER.unpack_from(chunk, offset)
    return length, chunk_type


def build_chunk(chunk_type: bytes, data: BytesLike) -> CodecBuffer:
    """Wrap *data* with a length prefix, *chunk_type* and its CRC32."""

    if len(chunk_type) != 4:
        raise ValueError("chunk_type must be exactly 4 ASCII bytes")
    crc = zlib.crc32(data, zlib.crc32(chunk_type)) & 0xFFFFFFFF
    encoded = bytearray(_CHUNK_HEADER.pack(len(data), chunk_type))
    encoded += data
    encoded += _CRC_STRUCT.pack(crc)
    return CodecBuffer(encoded)


def _validate_keyword(key: bytes) -> bytes:
    if not 1 <= len(key) <= MAX_KEYWORD_LENGTH:
        raise ValueError(f"keyword must be 1-{MAX_KEYWORD_LENGTH} bytes, got {len(key)}")
    if b"\0" in key:
        raise ValueError("keyword must not contain NUL bytes")
    return key


@dataclass(frozen=True)
class TextChunk:
    """A compressed key/value text chunk.

    On the wire the chunk data is ``key NUL method compressed-value`` where the
    compression method is always ``0`` (zlib). String keys are encoded as
    Latin-1, as PNG keywords are.
    """

    key: bytes
    value: bytes

    chunk_type: ClassVar[bytes] = b"zTXt"

    def __post_init__(self) -> None:
        if isinstance(self.key, str):
            object.__setattr__(self, "key", self.key.encode("latin-1"))
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "value", bytes(self.value))

    def encode_data(self) -> bytes:
        """Return the chunk data (keyword, separators and compressed value)."""

        key = _validate_keyword(self.key)
        with compress_buffer(self.value) as compressed:
            data = bytearray(key)
            data += b"\0\0"
            data += compressed.view()
        return bytes(data)

    def encode(self) -> CodecBuffer:
        """Return the complete chunk, ready to be spliced into an image."""

        return build_chunk(self.chunk_type, self.encode_data())

    @classmethod
    def decode(cls, chunk: BytesLike):
        """Decode the encoded chunk *chunk* (header and CRC included).

        The CRC is not checked.
        """

        length, _ = read_chunk_header(chunk)
        data_start = _CHUNK_HEADER.size
        data_end = data_start + length
        if data_end > len(chunk):
            raise CorruptChunkError("Encountered corrupt chunk (data extends past the buffer)")
        data = bytes(chunk[data_start:data_end])

        end_of_key = data.find(b"\0", 0, max(length - 1, 0))
        if end_of_key == -1:
            raise CorruptChunkError("Encountered corrupt chunk (missing keyword separator)")
        if data[end_of_key + 1] != 0:
            raise CorruptChunkError("Encountered corrupt chunk (unknown compression method)")

        return cls(key=data[:end_of_key], value=decompress(data[end_of_key + 2 :]))

    @classmethod
    def is_valid(cls, chunk: BytesLike) -> bool:
        """Return ``True`` when *chunk* carries this class's type tag."""

        return len(chunk) >= _CHUNK_HEADER.size and chunk[4:8] == cls.chunk_type
