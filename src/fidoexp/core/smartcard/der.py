"""Minimal DER header reader, enough to size an element inside a blob."""

from __future__ import annotations

from fidoexp.core.errors import MalformedResponseError


def _read_tag(data: bytes, offset: int) -> tuple[int, int]:
    """Read a BER-TLV tag and return (tag, new_offset)."""
    b = data[offset]
    offset += 1
    if (b & 0x1F) == 0x1F:
        tag = b
        while True:
            b = data[offset]
            tag = (tag << 8) | b
            offset += 1
            if not (b & 0x80):
                break
    else:
        tag = b
    return tag, offset


def _read_length(data: bytes, offset: int) -> tuple[int, int]:
    """Read a definite BER-TLV length and return (length, new_offset)."""
    b = data[offset]
    offset += 1
    if b < 0x80:
        return b, offset
    num_bytes = b & 0x7F
    if num_bytes == 0:
        raise MalformedResponseError("indefinite length not allowed in DER")
    length = 0
    for _ in range(num_bytes):
        length = (length << 8) | data[offset]
        offset += 1
    return length, offset


def read_header(data: bytes, offset: int = 0) -> tuple[int, int, int]:
    """Return (tag, value_offset, value_length) of the element at offset."""
    try:
        tag, offset = _read_tag(data, offset)
        length, offset = _read_length(data, offset)
    except IndexError:
        raise MalformedResponseError("truncated DER header") from None
    return tag, offset, length


def element_length(data: bytes, offset: int = 0) -> int:
    """Total encoded size (header + value) of the DER element at offset.

    Raises MalformedResponseError if the element runs past the data.
    """
    _, value_offset, length = read_header(data, offset)
    end = value_offset + length
    if end > len(data):
        raise MalformedResponseError(
            f"DER element needs {end - offset} bytes, {len(data) - offset} available"
        )
    return end - offset
