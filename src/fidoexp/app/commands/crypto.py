"""AES-128 helper commands (CBC, CMAC, CMAC-64)."""

from __future__ import annotations

import logging

from fidoexp.core.crypto import aes_cmac, aes_cmac8, aes_decode, aes_encode
from fidoexp.core.errors import CipherError

lg = logging.getLogger(__name__)

# All parameters here are hex strings.
_raw_commands: set[str] = {"encrypt", "decrypt", "cmac", "cmac8"}


def _run(label: str, func, key: str, data: str, *args) -> bool:
    try:
        out = func(bytes.fromhex(key), bytes.fromhex(data), *args)
    except CipherError as exc:
        lg.error("%s failed: %s (%s)", label, exc, exc.status.name)
        return False
    lg.info("%s: %s", label, out.hex(" ").upper())
    return True


def _iv(iv: str) -> bytes | None:
    return bytes.fromhex(iv) if iv else None


def cmd_encrypt(runner, *, key: str, data: str, iv: str = "") -> bool:
    """AES-128-CBC encrypt (key, data, optional iv; hex)."""
    return _run("encrypt", aes_encode, key, data, _iv(iv))


def cmd_decrypt(runner, *, key: str, data: str, iv: str = "") -> bool:
    """AES-128-CBC decrypt (key, data, optional iv; hex)."""
    return _run("decrypt", aes_decode, key, data, _iv(iv))


def cmd_cmac(runner, *, key: str, data: str = "") -> bool:
    """AES-CMAC-128 over data (hex)."""
    return _run("cmac", aes_cmac, key, data)


def cmd_cmac8(runner, *, key: str, data: str = "") -> bool:
    """AES-CMAC truncated to 8 bytes (odd-indexed bytes)."""
    return _run("cmac8", aes_cmac8, key, data)
