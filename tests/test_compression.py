from pathlib import Path
import random
import sys
import zlib

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pngfuse.buffer import CodecBuffer
from pngfuse import compression
from pngfuse.compression import compress, compress_buffer, decompress, decompress_buffer
from pngfuse.errors import CompressionError, DecompressionError


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"a",
        b"hello hello hello hello",
        bytes(range(256)) * 4,
        random.Random(1234).getrandbits(8 * 70_000).to_bytes(70_000, "big"),
        b"0123456789abcdef" * 8192,
    ],
    ids=["empty", "single", "repetitive", "all-bytes", "random-70k", "repetitive-128k"],
)
def test_compress_roundtrip(payload: bytes) -> None:
    assert decompress(compress(payload)) == payload


def test_compress_produces_zlib_stream() -> None:
    data = b"PNGFuse " * 1000
    compressed = compress(data)
    assert zlib.decompress(compressed) == data
    assert len(compressed) < len(data) // 10
    # zlib header: deflate with a 32 KiB window
    assert compressed[0] == 0x78


def test_decompress_accepts_foreign_streams() -> None:
    data = b"written by someone else"
    assert decompress(zlib.compress(data, 1)) == data


def test_decompress_rejects_garbage() -> None:
    with pytest.raises(DecompressionError):
        decompress(b"this is not a zlib stream")


def test_decompress_rejects_truncated_stream() -> None:
    compressed = compress(b"some data that will be cut short" * 20)
    with pytest.raises(DecompressionError):
        decompress(compressed[: len(compressed) // 2])


def test_decompress_rejects_empty_input() -> None:
    with pytest.raises(DecompressionError):
        decompress(b"")


def test_buffer_variants_release_on_exit() -> None:
    with compress_buffer(b"abc") as compressed:
        assert isinstance(compressed, CodecBuffer)
        with decompress_buffer(compressed.view()) as restored:
            assert bytes(restored) == b"abc"
        assert restored.released
    assert compressed.released


def test_codec_buffer_move_semantics() -> None:
    original = CodecBuffer(b"payload")
    moved = original.take()

    assert bytes(moved) == b"payload"
    assert len(moved) == 7
    assert original.released
    with pytest.raises(ValueError):
        bytes(original)
    with pytest.raises(ValueError):
        original.take()


def test_codec_buffer_released_on_error_path() -> None:
    buffer = CodecBuffer(bytearray(b"data"))
    with pytest.raises(RuntimeError):
        with buffer:
            raise RuntimeError("boom")
    assert buffer.released
    buffer.release()
    assert "released" in repr(buffer)


def test_codec_buffer_rejects_non_bytes() -> None:
    with pytest.raises(TypeError):
        CodecBuffer("text")


@pytest.mark.parametrize(("setting", "value"), [("level", 42), ("wbits", 99), ("mem_level", 0)])
def test_bad_settings_raise_compression_error(monkeypatch: pytest.MonkeyPatch, setting: str, value: int) -> None:
    monkeypatch.setitem(compression.COMPRESSION_SETTINGS, setting, value)
    with pytest.raises(CompressionError):
        compress(b"payload")
