"""Readers, writers, pipes and copy helpers.

Readers have ``read(size) -> bytes`` and return ``b""`` at end of input.
Writers have ``write(data) -> int``. Failures are raised as
:class:`gostd.errors.Error`.
"""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Optional, Protocol

from . import errors
from .errors import CauseError, Error

ERR_EOF = errors.new("EOF")
ERR_UNEXPECTED_EOF = errors.new("unexpected EOF")
ERR_BUFFER_TOO_SMALL = errors.new("buffer too small")
ERR_UNKNOWN_IO = errors.new("unknown I/O error")

_COPY_BUFFER_SIZE = 8192
_CHUNK_SIZE = 4096


class _Reader(Protocol):
    def read(self, size: int) -> bytes: ...


class _Writer(Protocol):
    def write(self, data: bytes) -> int: ...


class _WriterAt(Protocol):
    def write_at(self, data: bytes, offset: int) -> int: ...


class _TransferError(CauseError):
    """A failed transfer; ``n`` is the number of bytes moved before it failed."""

    def __init__(self, outer: Error, cause: Optional[Error], n: int) -> None:
        super().__init__(outer, cause)
        self.n = n


class Whence(IntEnum):
    """Origin for a seek."""

    SEEK_START = 0
    SEEK_CURRENT = 1
    SEEK_END = 2


class BytesReader:
    """Reads from an in-memory byte string, optionally in bounded chunks."""

    def __init__(self, data: bytes, chunk_size: Optional[int] = None) -> None:
        self._data = bytes(data)
        self._pos = 0
        self._chunk_size = chunk_size

    def read(self, size: int) -> bytes:
        if self._chunk_size is not None:
            size = min(size, self._chunk_size)
        chunk = self._data[self._pos:self._pos + max(size, 0)]
        self._pos += len(chunk)
        return chunk


class BytesWriter:
    """Collects written bytes in memory; supports positioned writes."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def write(self, data: bytes) -> int:
        self._buf.extend(data)
        return len(data)

    def write_at(self, data: bytes, offset: int) -> int:
        if offset < 0:
            raise errors.new("BytesWriter: negative offset")
        end = offset + len(data)
        if end > len(self._buf):
            self._buf.extend(b"\x00" * (end - len(self._buf)))
        self._buf[offset:end] = data
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class LimitedReader:
    """Reads at most ``n`` bytes from the underlying reader."""

    def __init__(self, reader: _Reader, n: int) -> None:
        self.reader = reader
        self.remaining = n
        self.total_read = 0

    def read(self, size: int) -> bytes:
        if self.remaining <= 0:
            return b""
        chunk = self.reader.read(min(size, self.remaining))
        self.remaining -= len(chunk)
        self.total_read += len(chunk)
        return chunk


class OffsetWriter:
    """Writes sequentially into a positioned writer, starting at a base offset."""

    def __init__(self, writer: Optional[_WriterAt], offset: int) -> None:
        self.writer = writer
        self.base = offset
        self.current_offset = offset

    def _target(self) -> _WriterAt:
        if self.writer is None:
            raise errors.new("OffsetWriter: null WriterAt")
        return self.writer

    def write_at(self, data: bytes, offset: int) -> int:
        return self._target().write_at(data, offset)

    def write(self, data: bytes) -> int:
        n = self._target().write_at(data, self.current_offset)
        if n > 0:
            self.current_offset += n
        return n

    def seek(self, offset: int, whence: Whence) -> int:
        """Move the write position; returns it relative to the base."""
        if whence == Whence.SEEK_START:
            new_offset = self.base + offset
        elif whence == Whence.SEEK_CURRENT:
            new_offset = self.current_offset + offset
        elif whence == Whence.SEEK_END:
            raise errors.new("OffsetWriter: SeekEnd not supported")
        else:
            raise errors.new("OffsetWriter: Invalid seek origin")
        if new_offset < self.base:
            raise errors.new("OffsetWriter: Seek before base not allowed")
        self.current_offset = new_offset
        return new_offset - self.base


class _SharedPipe:
    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._buffer = bytearray()
        self._closed = False
        self._close_error: Optional[Error] = None

    def write(self, data: bytes) -> int:
        with self._cond:
            if self._closed:
                raise errors.new("Pipe Write: closed")
            self._buffer.extend(data)
            self._cond.notify_all()
        return len(data)

    def read(self, size: int) -> bytes:
        if size <= 0:
            return b""
        with self._cond:
            self._cond.wait_for(lambda: self._buffer or self._closed)
            if self._buffer:
                chunk = bytes(self._buffer[:size])
                del self._buffer[:size]
                return chunk
            if self._close_error is not None:
                raise self._close_error
            return b""

    def close(self, err: Optional[Error]) -> None:
        with self._cond:
            if not self._closed:
                self._closed = True
                self._close_error = err
                self._cond.notify_all()


class PipeReader:
    """Reading end of an in-memory pipe."""

    def __init__(self, shared: _SharedPipe) -> None:
        self._pipe = shared

    def read(self, size: int) -> bytes:
        return self._pipe.read(size)

    def close(self) -> None:
        """Close the pipe; readers see end of input once it is drained."""
        self._pipe.close(None)

    def close_with_error(self, err: Optional[Error]) -> None:
        """Close the pipe; readers get ``err`` once it is drained."""
        self._pipe.close(err)

    def __enter__(self) -> "PipeReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PipeWriter:
    """Writing end of an in-memory pipe."""

    def __init__(self, shared: _SharedPipe) -> None:
        self._pipe = shared

    def write(self, data: bytes) -> int:
        return self._pipe.write(data)

    def close(self) -> None:
        """Close the pipe; readers see end of input once it is drained."""
        self._pipe.close(None)

    def close_with_error(self, err: Optional[Error]) -> None:
        """Close the pipe; readers get ``err`` once it is drained."""
        self._pipe.close(err)

    def __enter__(self) -> "PipeWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def pipe() -> tuple[PipeReader, PipeWriter]:
    """Create a connected in-memory pipe."""
    shared = _SharedPipe()
    return PipeReader(shared), PipeWriter(shared)


def _copy_with(dst: _Writer, src: _Reader, size: int) -> int:
    total = 0
    while chunk := src.read(size):
        total += dst.write(chunk)
    return total


def copy(dst: _Writer, src: _Reader) -> int:
    """Copy from ``src`` to ``dst`` until end of input; returns bytes written."""
    return _copy_with(dst, src, _COPY_BUFFER_SIZE)


def copy_buffer(dst: _Writer, src: _Reader, size: int) -> int:
    """Like :func:`copy`, using reads of at most ``size`` bytes."""
    if size <= 0:
        raise errors.cause(ERR_UNKNOWN_IO, None)
    return _copy_with(dst, src, size)


def copy_n(dst: _Writer, src: _Reader, n: int) -> int:
    """Copy exactly ``n`` bytes; running out early raises unexpected EOF."""
    total = 0
    while total < n:
        chunk = src.read(min(_CHUNK_SIZE, n - total))
        if not chunk:
            raise _TransferError(ERR_UNEXPECTED_EOF, ERR_EOF, total)
        total += dst.write(chunk)
    return total


def read_all(reader: _Reader) -> bytes:
    """Read until end of input."""
    out = bytearray()
    while chunk := reader.read(_CHUNK_SIZE):
        out.extend(chunk)
    return bytes(out)


def read_at_least(reader: _Reader, size: int, minimum: int) -> bytes:
    """Read at least ``minimum`` and at most ``size`` bytes."""
    if size < minimum:
        raise _TransferError(ERR_BUFFER_TOO_SMALL, None, 0)
    out = bytearray()
    while len(out) < minimum:
        chunk = reader.read(size - len(out))
        if not chunk:
            raise _TransferError(ERR_UNEXPECTED_EOF, ERR_EOF, len(out))
        out.extend(chunk)
    return bytes(out)


def read_full(reader: _Reader, size: int) -> bytes:
    """Read exactly ``size`` bytes."""
    out = bytearray()
    while len(out) < size:
        try:
            chunk = reader.read(size - len(out))
        except Error as exc:
            raise _TransferError(ERR_UNEXPECTED_EOF, exc, len(out)) from exc
        if not chunk:
            raise _TransferError(ERR_UNEXPECTED_EOF, None, len(out))
        out.extend(chunk)
    return bytes(out)


def write_string(writer: _Writer, s: str) -> int:
    """Write ``s`` encoded as UTF-8; returns bytes written."""
    if not s:
        return 0
    return writer.write(s.encode("utf-8"))