"""Card information collected during a session."""

from __future__ import annotations

from dataclasses import dataclass

from fidoexp.core.fido import Authentication, Registration


@dataclass
class CardInfo:
    """What the shell has learned about the authenticator so far."""

    uid: bytes | None = None
    atr: bytes = b""
    version: str | None = None
    registration: Registration | None = None
    authentication: Authentication | None = None


def _hex(data: bytes | None) -> str:
    return data.hex(" ").upper() if data else "(none)"


def format_card_info(info: CardInfo) -> str:
    """Render collected card information as indented text."""
    lines = [
        f"  UID:         {_hex(info.uid)}",
        f"  ATR:         {_hex(info.atr)}",
        f"  Version:     {info.version or '(unknown)'}",
    ]
    reg = info.registration
    if reg is not None:
        lines += [
            "  Registration:",
            f"    public key:  {reg.public_key.hex().upper()}",
            f"    key handle:  [{len(reg.key_handle)}] {reg.key_handle.hex().upper()}",
            f"    certificate: [{len(reg.certificate)}] {reg.certificate[:20].hex().upper()}...",
            f"    signature:   [{len(reg.signature)}] {reg.signature.hex().upper()}",
        ]
    auth = info.authentication
    if auth is not None:
        lines += [
            "  Authentication:",
            f"    user present: {auth.user_present}",
            f"    counter:      {auth.counter}",
            f"    signature:    [{len(auth.signature)}] {auth.signature.hex().upper()}",
        ]
    return "\n".join(lines)
