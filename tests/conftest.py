from pathlib import Path
import struct
import sys
import zlib

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _chunk(chunk_type: bytes, data: bytes) -> bytes:
    return (
        struct.pack(">I", len(data))
        + chunk_type
        + data
        + struct.pack(">I", zlib.crc32(chunk_type + data) & 0xFFFFFFFF)
    )


def _ihdr(width: int = 2, height: int = 2) -> bytes:
    return _chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0))


def _idat_chunks(width: int = 2, height: int = 2, parts: int = 2) -> list:
    rows = b"".join(b"\x00" + bytes(range(row, row + width * 3)) for row in range(height))
    stream = zlib.compress(rows)
    step = max(1, -(-len(stream) // parts))
    return [_chunk(b"IDAT", stream[i : i + step]) for i in range(0, len(stream), step)]


@pytest.fixture
def make_chunk():
    """Return a builder for a complete chunk (length, type, data, CRC)."""
    return _chunk


@pytest.fixture
def build_png():
    """Return a builder that prefixes the PNG signature to the given chunks."""

    def _build(*chunks: bytes) -> bytes:
        return SIGNATURE + b"".join(chunks)

    return _build


@pytest.fixture
def png_chunks():
    """Chunks of a small 2x2 RGB image whose pixel data spans two IDAT chunks."""
    idat = _idat_chunks()
    assert len(idat) == 2
    return {
        "IHDR": _ihdr(),
        "tEXt": _chunk(b"tEXt", b"Comment\x00cover image"),
        "IDAT": idat,
        "tIME": _chunk(b"tIME", struct.pack(">HBBBBB", 2021, 5, 4, 3, 2, 1)),
        "IEND": _chunk(b"IEND", b""),
    }


@pytest.fixture
def minimal_png(png_chunks) -> bytes:
    """IHDR, tEXt, IDAT, IDAT, tIME, IEND."""
    return (
        SIGNATURE
        + png_chunks["IHDR"]
        + png_chunks["tEXt"]
        + b"".join(png_chunks["IDAT"])
        + png_chunks["tIME"]
        + png_chunks["IEND"]
    )


@pytest.fixture
def minimal_png_file(tmp_path: Path, minimal_png: bytes) -> Path:
    path = tmp_path / "cover.png"
    path.write_bytes(minimal_png)
    return path
