"""Split a byte stream into sentences on a fixed delimiter.

The stream is scanned byte by byte against the UTF-8 encoding of the
delimiter character. Only the bytes of the sentence currently being
read are held in memory, so arbitrarily large inputs can be streamed.

Each delimiter-terminated unit is decoded as UTF-8 and stripped of all
whitespace, interior whitespace included. A unit that fails to decode
is yielded as a :class:`~ginkou.models.Segment` carrying the error, so
the caller can skip it and carry on with the rest of the stream.
Trailing bytes after the last delimiter never form a sentence.
"""

from __future__ import annotations

import functools
import io
from collections.abc import Iterator
from typing import BinaryIO

from ginkou.models import Segment

DEFAULT_DELIMITER = "。"

_CHUNK_SIZE = 8192


def encode_delimiter(delimiter: str) -> bytes:
    """Return the byte pattern for ``delimiter``, rejecting unusable ones."""
    if len(delimiter) != 1:
        raise ValueError(
            f"Delimiter must be a single character, got {delimiter!r}"
        )
    if delimiter.isspace():
        raise ValueError("Delimiter must not be whitespace")
    return delimiter.encode("utf-8")


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character from ``text``."""
    return "".join(text.split())


def _units(stream: BinaryIO, pattern: bytes) -> Iterator[bytes]:
    """Yield raw delimiter-terminated byte units from ``stream``."""
    buf = bytearray()
    matched = 0
    for chunk in iter(functools.partial(stream.read, _CHUNK_SIZE), b""):
        for byte in chunk:
            buf.append(byte)
            # A mismatch restarts from zero even if the byte would open
            # a new match.
            if byte == pattern[matched]:
                matched += 1
            else:
                matched = 0
            if matched == len(pattern):
                yield bytes(buf)
                buf.clear()
                matched = 0


def sentences(
    stream: BinaryIO, delimiter: str = DEFAULT_DELIMITER
) -> Iterator[Segment]:
    """Lazily segment ``stream`` into numbered sentence units.

    Units are numbered from 1 in stream order, decode failures included.
    The iterator is single-pass: it consumes ``stream``.
    """
    pattern = encode_delimiter(delimiter)
    for index, raw in enumerate(_units(stream, pattern), start=1):
        try:
            decoded = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            yield Segment(index=index, raw=raw, error=e)
        else:
            yield Segment(index=index, raw=raw, text=strip_whitespace(decoded))


def split_text(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Segment an in-memory string, returning only the decoded sentences."""
    stream = io.BytesIO(text.encode("utf-8"))
    return [seg.text for seg in sentences(stream, delimiter) if seg.ok]
