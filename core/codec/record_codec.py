"""Minimized-log record codec.

Record layout (one per line)::

    <template index in decimal><part>...<part>\\n

    part := "C"                        literal marker
          | "I" <signed decimal> "|"   integer hole value
          | "S" <byte length> ":" <raw bytes>   token hole value

The index has no terminator of its own. Its digits end at the first tag
byte, so tag bytes must never be decimal digits. String payloads are
length-prefixed and unescaped; they may contain any byte, newline included.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from typing import BinaryIO

from core.templates.models import MatchedInt, MatchedLiteral, MatchedString, TemplateMatch
from core.utils.errors import RecordFormatError

TAG_LITERAL = b"C"
TAG_INT = b"I"
TAG_STRING = b"S"
INT_TERMINATOR = b"|"
LENGTH_TERMINATOR = b":"
RECORD_END = b"\n"

_DIGITS = frozenset(b"0123456789")
_SIGNS = frozenset(b"+-")


def serialize_match(match: TemplateMatch, encoding: str = "utf-8") -> bytes:
    """Serialize match parts followed by the record newline."""

    chunks: list[bytes] = []
    for part in match.parts:
        if isinstance(part, MatchedLiteral):
            chunks.append(TAG_LITERAL)
        elif isinstance(part, MatchedInt):
            chunks.append(TAG_INT + str(part.value).encode("ascii") + INT_TERMINATOR)
        elif isinstance(part, MatchedString):
            payload = part.value.encode(encoding, errors="surrogateescape")
            chunks.append(TAG_STRING + str(len(payload)).encode("ascii") + LENGTH_TERMINATOR)
            chunks.append(payload)
        else:
            raise TypeError(f"Unknown matched part: {part!r}")
    chunks.append(RECORD_END)
    return b"".join(chunks)


def encode_record(template_index: int, match: TemplateMatch, encoding: str = "utf-8") -> bytes:
    """Build one minimized-log record tagged with its template index."""

    return str(template_index).encode("ascii") + serialize_match(match, encoding)


def deserialize_match(data: bytes, encoding: str = "utf-8") -> TemplateMatch:
    """Decode one serialized match (without index) from bytes."""

    reader = RecordReader(io.BytesIO(data), encoding=encoding)
    return reader.read_match()


class RecordReader:
    """Sequential reader of minimized-log records from a byte stream."""

    def __init__(self, stream: BinaryIO, *, encoding: str = "utf-8") -> None:
        self._stream = stream
        self._encoding = encoding
        self._pushback: bytes = b""
        self.record_number = 0

    def __iter__(self) -> Iterator[tuple[int, TemplateMatch]]:
        while True:
            record = self.read_record()
            if record is None:
                return
            yield record

    def read_record(self) -> tuple[int, TemplateMatch] | None:
        """Read the next (template_index, match) pair, or None at end of stream.

        Empty lines between records are skipped.
        """

        first = self._read_byte()
        while first == RECORD_END:
            first = self._read_byte()
        if not first:
            return None

        self.record_number += 1
        if first[0] not in _DIGITS:
            raise self._error(f"missing template index, got {first!r}")

        digits = bytearray(first)
        while True:
            byte = self._require_byte()
            if byte[0] not in _DIGITS:
                self._pushback = byte
                break
            digits += byte

        return int(digits), self.read_match()

    def read_match(self) -> TemplateMatch:
        """Read tagged parts until the bare record newline."""

        match = TemplateMatch()
        while True:
            tag = self._require_byte()
            if tag == RECORD_END:
                return match
            if tag == TAG_LITERAL:
                match.parts.append(MatchedLiteral())
            elif tag == TAG_INT:
                match.parts.append(MatchedInt(self._read_int()))
            elif tag == TAG_STRING:
                match.parts.append(MatchedString(self._read_string()))
            else:
                raise self._error(f"unknown part tag {tag!r}")

    def _read_int(self) -> int:
        text = bytearray()
        byte = self._require_byte()
        if byte[0] in _SIGNS:
            text += byte
            byte = self._require_byte()
        while byte[0] in _DIGITS:
            text += byte
            byte = self._require_byte()
        if not text or text[-1] not in _DIGITS:
            raise self._error("integer part has no digits")
        if byte != INT_TERMINATOR:
            raise self._error(f"expected {INT_TERMINATOR!r} after integer, got {byte!r}")
        return int(text)

    def _read_string(self) -> str:
        length_digits = bytearray()
        byte = self._require_byte()
        while byte[0] in _DIGITS:
            length_digits += byte
            byte = self._require_byte()
        if not length_digits:
            raise self._error("string part has no length")
        if byte != LENGTH_TERMINATOR:
            raise self._error(f"expected {LENGTH_TERMINATOR!r} after length, got {byte!r}")

        length = int(length_digits)
        payload = self._stream.read(length) if length else b""
        if len(payload) != length:
            raise self._error(f"string part truncated: wanted {length} bytes, got {len(payload)}")
        return payload.decode(self._encoding, errors="surrogateescape")

    def _read_byte(self) -> bytes:
        if self._pushback:
            byte, self._pushback = self._pushback, b""
            return byte
        return self._stream.read(1)

    def _require_byte(self) -> bytes:
        byte = self._read_byte()
        if not byte:
            raise self._error("truncated record: unexpected end of stream")
        return byte

    def _error(self, message: str) -> RecordFormatError:
        return RecordFormatError(message, record_number=self.record_number or None)
