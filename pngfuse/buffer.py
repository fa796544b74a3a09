"""Owning wrapper for byte buffers produced by the codecs."""

from __future__ import annotations

from typing import Optional, Union

__all__ = ["CodecBuffer"]

BytesLike = Union[bytes, bytearray, memoryview]


class CodecBuffer:
    """Single owner of a codec result.

    Ownership moves with :meth:`take`; the source is left empty and any later
    access raises :class:`ValueError`. :meth:`release` drops the backing
    storage and is safe to call more than once. Used as a context manager the
    buffer is released on every exit path.
    """

    __slots__ = ("_data",)

    def __init__(self, data: BytesLike) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("CodecBuffer requires a bytes-like object")
        self._data: Optional[bytes] = bytes(data)

    def _require(self) -> bytes:
        if self._data is None:
            raise ValueError("CodecBuffer has been released or moved")
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    def view(self) -> memoryview:
        """Return a read-only view of the owned bytes."""

        return memoryview(self._require())

    def take(self) -> "CodecBuffer":
        """Move the contents into a new owner and empty this one."""

        moved = CodecBuffer.__new__(CodecBuffer)
        moved._data = self._require()
        self._data = None
        return moved

    def release(self) -> None:
        self._data = None

    def __bytes__(self) -> bytes:
        return self._require()

    def __len__(self) -> int:
        return len(self._require())

    def __enter__(self) -> "CodecBuffer":
        self._require()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._data is None:
            return "CodecBuffer(<released>)"
        return f"CodecBuffer({len(self._data)} bytes)"
