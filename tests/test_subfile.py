from pathlib import Path
import sys
import zlib

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pngfuse.chunks import TextChunk
from pngfuse.errors import CorruptChunkError, CorruptPayloadError
from pngfuse.subfile import FUSE_CHUNK_TYPE, FUSE_KEYWORD, FuseChunk, SubFile, merge, split


@pytest.mark.parametrize(
    "filename, contents",
    [
        ("notes.txt", b"hello"),
        ("empty.bin", b""),
        ("日本語 файл.txt", b"unicode name"),
        ("nul-heavy.bin", b"\x00\x00\x00data\x00"),
    ],
)
def test_merge_split_roundtrip(filename: str, contents: bytes) -> None:
    assert split(merge(filename, contents)) == SubFile(filename, contents)


def test_merged_format_is_name_nul_contents() -> None:
    assert merge("a.txt", b"xyz") == b"a.txt\x00xyz"
    assert SubFile("a.txt", b"xyz").merged() == b"a.txt\x00xyz"
    assert SubFile.from_merged(b"a.txt\x00xyz") == SubFile("a.txt", b"xyz")


def test_first_nul_ends_filename() -> None:
    sub_file = split(b"name\x00more\x00bytes")
    assert sub_file.name == "name"
    assert sub_file.contents == b"more\x00bytes"


def test_split_requires_separator() -> None:
    with pytest.raises(CorruptPayloadError):
        split(b"no separator at all")


def test_split_rejects_non_utf8_name() -> None:
    with pytest.raises(CorruptPayloadError):
        split(b"\xff\xfe\x00contents")


def test_fuse_chunk_roundtrip() -> None:
    sub_file = SubFile("report.pdf", b"%PDF-1.7 fake" * 100)
    encoded = bytes(FuseChunk.from_subfile(sub_file).encode())

    assert encoded[4:8] == FUSE_CHUNK_TYPE
    assert encoded[8:].startswith(FUSE_KEYWORD + b"\x00\x00")
    assert FuseChunk.is_valid(encoded)

    decoded = FuseChunk.decode(encoded)
    assert isinstance(decoded, FuseChunk)
    assert decoded.key == FUSE_KEYWORD
    assert decoded.to_subfile() == sub_file


def test_fuse_chunk_type_is_private_ancillary() -> None:
    first, second, third, _ = FUSE_CHUNK_TYPE
    assert first & 0x20  # ancillary
    assert second & 0x20  # private
    assert not third & 0x20  # reserved bit
    assert FUSE_CHUNK_TYPE not in (b"IDAT", b"IEND", b"IHDR", b"zTXt")


def test_is_valid_requires_keyword(make_chunk) -> None:
    compressed = zlib.compress(b"a\x00b")
    assert FuseChunk.is_valid(make_chunk(b"fuSe", b"PNGFuse\x00\x00" + compressed))
    assert not FuseChunk.is_valid(make_chunk(b"fuSe", b"Other\x00\x00" + compressed))
    assert not FuseChunk.is_valid(make_chunk(b"fuSe", b"PNG"))
    assert not FuseChunk.is_valid(make_chunk(b"zTXt", b"PNGFuse\x00\x00" + compressed))


def test_text_chunks_are_not_fuse_chunks() -> None:
    encoded = bytes(TextChunk(FUSE_KEYWORD, b"x").encode())
    assert TextChunk.is_valid(encoded)
    assert not FuseChunk.is_valid(encoded)


def test_keyword_prefix_match_is_loose(make_chunk) -> None:
    # Passes the filter, fails on full decode
    chunk = make_chunk(b"fuSe", b"PNGFusedX\x01garbage")
    assert FuseChunk.is_valid(chunk)
    with pytest.raises(CorruptChunkError):
        FuseChunk.decode(chunk)


def test_subfile_from_file_keeps_only_name(tmp_path: Path) -> None:
    nested = tmp_path / "deep" / "dir"
    nested.mkdir(parents=True)
    source = nested / "data.bin"
    source.write_bytes(b"\x01\x02")

    assert SubFile.from_file(source) == SubFile("data.bin", b"\x01\x02")


def test_subfile_save_stays_inside_directory(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    written = SubFile("../../escape.txt", b"data").save(out_dir)

    assert written == out_dir / "escape.txt"
    assert written.read_bytes() == b"data"
    assert not (tmp_path / "escape.txt").exists()


def test_subfile_save_rejects_unusable_names(tmp_path: Path) -> None:
    with pytest.raises(CorruptPayloadError):
        SubFile("..", b"data").save(tmp_path)
