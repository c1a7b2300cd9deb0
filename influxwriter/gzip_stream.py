"""Lazy gzip compression of a byte stream."""

from __future__ import annotations

import io
import zlib
from collections.abc import Iterator
from typing import IO, Union

_CHUNK_SIZE = 64 * 1024

Source = Union[str, bytes, bytearray, memoryview, IO[bytes], IO[str]]


def _chunks(source: Source) -> Iterator[bytes]:
    if isinstance(source, str):
        source = source.encode("utf-8")
    if isinstance(source, (bytes, bytearray, memoryview)):
        source = io.BytesIO(bytes(source))
    while chunk := source.read(_CHUNK_SIZE):
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


class _GzipStream(io.RawIOBase):
    """Raw readable stream yielding gzip data produced on demand."""

    def __init__(self, chunks: Iterator[bytes]) -> None:
        super().__init__()
        self._chunks = chunks
        self._compressor = zlib.compressobj(wbits=31)
        self._pending = b""
        self._finished = False

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending and not self._finished:
            chunk = next(self._chunks, None)
            if chunk is None:
                self._pending = self._compressor.flush()
                self._finished = True
            else:
                self._pending = self._compressor.compress(chunk)
        count = min(len(buffer), len(self._pending))
        buffer[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count


def compress_with_gzip(data: Source) -> io.BufferedReader:
    """Return a readable binary stream with ``data`` gzip-compressed.

    ``data`` may be text, bytes or a readable file object; compression
    happens lazily as the result is read.
    """
    return io.BufferedReader(_GzipStream(_chunks(data)))