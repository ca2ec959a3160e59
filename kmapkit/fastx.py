"""Streaming reader for FASTA and FASTQ files, plain or gzip-compressed."""

from __future__ import annotations

import gzip
import os
import re
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Union

_BUFSIZE = 16384
_GZIP_MAGIC = b"\x1f\x8b"
_SPACE = re.compile(rb"[ \t\n\v\f\r]")

_NL = 0x0A
_CR = 0x0D
_GT = ord(">")
_AT = ord("@")
_PLUS = ord("+")


class TruncatedQualityError(ValueError):
    """A FASTQ record whose quality string is missing or of the wrong length."""


@dataclass(frozen=True)
class FastxRecord:
    """One sequence record; ``quality`` is None for FASTA input."""

    name: str
    comment: str
    sequence: str
    quality: Optional[str] = None

    def __len__(self) -> int:
        return len(self.sequence)


def _decode(data: bytearray) -> str:
    return data.decode("latin-1")


class _ByteStream:
    """Buffered byte source with single-byte and delimited reads."""

    def __init__(self, raw) -> None:
        self._raw = raw
        self._buf = b""
        self._pos = 0
        self._eof = False

    def _fill(self) -> bool:
        if self._eof:
            return False
        chunk = self._raw.read(_BUFSIZE)
        if isinstance(chunk, str):
            chunk = chunk.encode("latin-1")
        if not chunk:
            self._eof = True
            self._buf, self._pos = b"", 0
            return False
        self._buf, self._pos = chunk, 0
        return True

    def exhausted(self) -> bool:
        if self._pos < len(self._buf):
            return False
        return not self._fill()

    def getc(self) -> int:
        """Next byte, or -1 at end of input."""
        if self._pos >= len(self._buf) and not self._fill():
            return -1
        c = self._buf[self._pos]
        self._pos += 1
        return c

    def read_until(self, into: bytearray, line: bool) -> int:
        """Append bytes up to a line end (``line``) or any whitespace.

        Returns the delimiter byte consumed, 0 if input ended first, or -1 if
        there was no input left to read at all.
        """
        if self.exhausted():
            return -1
        delim = 0
        while True:
            if self._pos >= len(self._buf) and not self._fill():
                break
            buf = self._buf
            if line:
                i = buf.find(b"\n", self._pos)
                if i < 0:
                    i = len(buf)
            else:
                match = _SPACE.search(buf, self._pos)
                i = match.start() if match else len(buf)
            into += buf[self._pos:i]
            self._pos = i + 1
            if i < len(buf):
                delim = buf[i]
                break
        if line and len(into) > 1 and into[-1] == _CR:
            del into[-1]
        return delim


class FastxReader:
    """Reads FASTA/FASTQ records one after another from a byte stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._raw = stream
        self._stream = _ByteStream(stream)
        self._last_char = 0
        self._owns = True

    def __iter__(self) -> Iterator[FastxRecord]:
        while (record := self.read()) is not None:
            yield record

    def __enter__(self) -> "FastxReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def read(self) -> Optional[FastxRecord]:
        """Return the next record, or None at end of input.

        Raises TruncatedQualityError for a FASTQ record whose quality string
        is absent or does not match the sequence length.
        """
        s = self._stream
        if self._last_char == 0:
            while True:
                c = s.getc()
                if c == -1:
                    return None
                if c in (_GT, _AT):
                    break
            self._last_char = c
        name = bytearray()
        c = s.read_until(name, line=False)
        if c < 0:
            return None
        comment = bytearray()
        if c != _NL:
            s.read_until(comment, line=True)
        seq = bytearray()
        while True:
            c = s.getc()
            if c == -1 or c in (_GT, _PLUS, _AT):
                break
            if c == _NL:
                continue
            seq.append(c)
            s.read_until(seq, line=True)
        if c in (_GT, _AT):
            self._last_char = c
        if c != _PLUS:
            return FastxRecord(_decode(name), _decode(comment), _decode(seq))
        while True:
            c = s.getc()
            if c == -1 or c == _NL:
                break
        if c == -1:
            raise TruncatedQualityError(f"record {_decode(name)!r} has no quality string")
        qual = bytearray()
        while s.read_until(qual, line=True) >= 0 and len(qual) < len(seq):
            pass
        self._last_char = 0
        if len(qual) != len(seq):
            raise TruncatedQualityError(
                f"record {_decode(name)!r}: quality length {len(qual)} "
                f"differs from sequence length {len(seq)}"
            )
        return FastxRecord(_decode(name), _decode(comment), _decode(seq), _decode(qual))

    def close(self) -> None:
        """Release the underlying stream."""
        if self._owns:
            self._raw.close()


def open_fastx(path: Union[str, os.PathLike, None]) -> FastxReader:
    """Open a FASTA/FASTQ file, gzip-compressed or not; None or "-" is stdin."""
    if path is None or path == "-":
        raw = sys.stdin.buffer
        stream = gzip.GzipFile(fileobj=raw) if raw.peek(2)[:2] == _GZIP_MAGIC else raw
        reader = FastxReader(stream)
        reader._owns = False
        return reader
    with open(path, "rb") as fh:
        magic = fh.read(2)
    stream = gzip.open(path, "rb") if magic == _GZIP_MAGIC else open(path, "rb")
    return FastxReader(stream)