"""Parsers for assembled U2F response messages."""

from __future__ import annotations

from dataclasses import dataclass

from fidoexp.core.errors import MalformedResponseError
from fidoexp.core.smartcard.der import element_length

REGISTER_RESERVED = 0x05
PUBLIC_KEY_SIZE = 65


@dataclass
class Registration:
    """Parsed REGISTER response."""

    public_key: bytes
    key_handle: bytes
    certificate: bytes
    signature: bytes


@dataclass
class Authentication:
    """Parsed AUTHENTICATE response."""

    user_presence: int
    counter: int
    signature: bytes

    @property
    def user_present(self) -> bool:
        return bool(self.user_presence & 0x01)


def check_registration(data: bytes) -> None:
    """Raise MalformedResponseError unless data starts with the 0x05 marker."""
    if not data:
        raise MalformedResponseError("empty registration response")
    if data[0] != REGISTER_RESERVED:
        raise MalformedResponseError(
            f"first byte must be {REGISTER_RESERVED:02X}, got {data[0]:02X}"
        )


def parse_registration(data: bytes) -> Registration:
    """Split a REGISTER response into its fields.

    Layout: 05 | public key (65) | L | key handle (L) | X.509 DER | signature.
    The certificate size comes from its own DER header.
    """
    check_registration(data)
    offset = 1
    public_key = data[offset : offset + PUBLIC_KEY_SIZE]
    offset += PUBLIC_KEY_SIZE
    if len(data) < offset + 1:
        raise MalformedResponseError("registration response truncated in public key")
    handle_len = data[offset]
    offset += 1
    key_handle = data[offset : offset + handle_len]
    offset += handle_len
    if len(key_handle) != handle_len or offset >= len(data):
        raise MalformedResponseError("registration response truncated in key handle")
    cert_len = element_length(data, offset)
    certificate = data[offset : offset + cert_len]
    offset += cert_len
    return Registration(
        public_key=public_key,
        key_handle=key_handle,
        certificate=certificate,
        signature=data[offset:],
    )


def parse_authentication(data: bytes) -> Authentication:
    """Split an AUTHENTICATE response: presence (1) | counter (4) | signature."""
    if len(data) < 5:
        raise MalformedResponseError(
            f"authentication response too short: {len(data)} bytes"
        )
    return Authentication(
        user_presence=data[0],
        counter=int.from_bytes(data[1:5], "big"),
        signature=data[5:],
    )
