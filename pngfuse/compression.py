"""zlib compression used for text chunk values."""

from __future__ import annotations

import zlib
from typing import Union

from config import COMPRESSION_SETTINGS

from .buffer import CodecBuffer
from .errors import CompressionError, DecompressionError

__all__ = [
    "compress",
    "compress_buffer",
    "decompress",
    "decompress_buffer",
]

BytesLike = Union[bytes, bytearray, memoryview]


def compress_buffer(data: BytesLike) -> CodecBuffer:
    """Compress *data* into a zlib stream using the maximum-ratio settings."""

    try:
        compressor = zlib.compressobj(
            COMPRESSION_SETTINGS["level"],
            zlib.DEFLATED,
            COMPRESSION_SETTINGS["wbits"],
            COMPRESSION_SETTINGS["mem_level"],
            COMPRESSION_SETTINGS["strategy"],
        )
        compressed = compressor.compress(data) + compressor.flush()
    except (zlib.error, ValueError) as exc:
        raise CompressionError(str(exc)) from exc
    return CodecBuffer(compressed)


def decompress_buffer(data: BytesLike) -> CodecBuffer:
    """Inflate a complete zlib stream.

    Raises :class:`DecompressionError` when the stream is malformed or ends
    before its final block.
    """

    decompressor = zlib.decompressobj()
    try:
        inflated = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as exc:
        raise DecompressionError(str(exc)) from exc
    if not decompressor.eof:
        raise DecompressionError("incomplete or truncated stream")
    return CodecBuffer(inflated)


def compress(data: BytesLike) -> bytes:
    with compress_buffer(data) as buffer:
        return bytes(buffer)


def decompress(data: BytesLike) -> bytes:
    with decompress_buffer(data) as buffer:
        return bytes(buffer)
