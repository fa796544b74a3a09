"""PNGFuse: store files inside private PNG chunks."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "PNG_SIGNATURE",
    "FUSE_CHUNK_TYPE",
    "FUSE_KEYWORD",
    "ChunkInfo",
    "ChunkKind",
    "ChunkStore",
    "CodecBuffer",
    "FuseChunk",
    "SubFile",
    "SubFileStore",
    "TextChunk",
    "build_chunk",
    "compress",
    "decompress",
    "merge",
    "split",
    "CompressionError",
    "CorruptChunkError",
    "CorruptPayloadError",
    "DecompressionError",
    "FuseError",
    "InvalidFormatError",
    "IoError",
]


if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .buffer import CodecBuffer
    from .chunk_store import ChunkInfo, ChunkStore
    from .chunks import PNG_SIGNATURE, ChunkKind, TextChunk, build_chunk
    from .compression import compress, decompress
    from .errors import (
        CompressionError,
        CorruptChunkError,
        CorruptPayloadError,
        DecompressionError,
        FuseError,
        InvalidFormatError,
        IoError,
    )
    from .subfile import FUSE_CHUNK_TYPE, FUSE_KEYWORD, FuseChunk, SubFile, merge, split
    from .subfile_store import SubFileStore


_EXPORTS = {
    "CodecBuffer": ".buffer",
    "ChunkInfo": ".chunk_store",
    "ChunkStore": ".chunk_store",
    "PNG_SIGNATURE": ".chunks",
    "ChunkKind": ".chunks",
    "TextChunk": ".chunks",
    "build_chunk": ".chunks",
    "compress": ".compression",
    "decompress": ".compression",
    "CompressionError": ".errors",
    "CorruptChunkError": ".errors",
    "CorruptPayloadError": ".errors",
    "DecompressionError": ".errors",
    "FuseError": ".errors",
    "InvalidFormatError": ".errors",
    "IoError": ".errors",
    "FUSE_CHUNK_TYPE": ".subfile",
    "FUSE_KEYWORD": ".subfile",
    "FuseChunk": ".subfile",
    "SubFile": ".subfile",
    "merge": ".subfile",
    "split": ".subfile",
    "SubFileStore": ".subfile_store",
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = import_module(_EXPORTS[name], __name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
