"""AES-128 primitives: CBC encrypt/decrypt, CMAC-128 and CMAC-64.

CBC follows NIST SP 800-38A, CMAC follows NIST SP 800-38B. Data is never
padded or truncated; keys are only used for the duration of one call.
"""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.cmac import CMAC

from fidoexp.core.errors import CipherKeyError, CipherOperationError

BLOCK_SIZE = 16
KEY_SIZE = 16
ZERO_IV = b"\x00" * BLOCK_SIZE


def _aes(key: bytes) -> algorithms.AES:
    """Key schedule for AES-128; anything but a 16-byte key is refused."""
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
        size = len(key) if isinstance(key, (bytes, bytearray)) else type(key).__name__
        raise CipherKeyError(f"AES-128 needs a 16-byte key, got {size}")
    try:
        return algorithms.AES(bytes(key))
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise CipherKeyError(str(exc)) from exc


def _cbc(key: bytes, iv: bytes | None, data: bytes) -> Cipher:
    algorithm = _aes(key)
    if len(data) == 0 or len(data) % BLOCK_SIZE:
        raise CipherOperationError(
            f"data length {len(data)} is not a positive multiple of {BLOCK_SIZE}"
        )
    try:
        return Cipher(algorithm, modes.CBC(bytes(iv) if iv is not None else ZERO_IV))
    except ValueError as exc:
        raise CipherOperationError(str(exc)) from exc


def aes_encode(key: bytes, data: bytes, iv: bytes | None = None) -> bytes:
    """AES-128-CBC encrypt; a zero IV is used when iv is None."""
    enc = _cbc(key, iv, data).encryptor()
    try:
        return enc.update(bytes(data)) + enc.finalize()
    except ValueError as exc:
        raise CipherOperationError(str(exc)) from exc


def aes_decode(key: bytes, data: bytes, iv: bytes | None = None) -> bytes:
    """AES-128-CBC decrypt; a zero IV is used when iv is None."""
    dec = _cbc(key, iv, data).decryptor()
    try:
        return dec.update(bytes(data)) + dec.finalize()
    except ValueError as exc:
        raise CipherOperationError(str(exc)) from exc


def aes_cmac(key: bytes, data: bytes) -> bytes:
    """Compute 16-byte AES-CMAC over data of any length.

    The tag is only returned once complete; any failure raises instead.
    """
    c = CMAC(_aes(key))
    try:
        c.update(bytes(data))
        return c.finalize()
    except (TypeError, ValueError) as exc:
        raise CipherOperationError(str(exc)) from exc


def truncate_cmac(mac: bytes) -> bytes:
    """Derive the 8-byte tag from a CMAC-128: the odd-indexed bytes 1, 3 .. 15."""
    if len(mac) != BLOCK_SIZE:
        raise CipherOperationError(f"CMAC must be 16 bytes, got {len(mac)}")
    return bytes(mac[1::2])


def aes_cmac8(key: bytes, data: bytes) -> bytes:
    """Compute the 8-byte truncated AES-CMAC."""
    return truncate_cmac(aes_cmac(key, data))


def sha256(data: bytes) -> bytes:
    """SHA-256 digest, used for U2F challenge and application parameters."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()
