"""FIDO terminal messages and results.

Every result carries ``status`` (an ExchangeStatus), the final ``sw``
when the card answered, and ``error`` when the status is not OK.
"""

from __future__ import annotations

from dataclasses import dataclass

from fidoexp.core.base import Message, Result
from fidoexp.core.fido.protocol import AUTH_ENFORCE
from fidoexp.core.fido.responses import Authentication, Registration

SELECT_CAPACITY = 260
RESPONSE_CAPACITY = 2048


@dataclass
class SelectMessage(Message):
    """SELECT the FIDO applet (AID A0 00 00 06 47 2F 00 01)."""

    activate_field: bool = True
    leave_field_on: bool = True
    capacity: int = SELECT_CAPACITY


@dataclass
class SelectResult(Result):
    data: bytes = b""
    version: str | None = None
    continuations: int = 0


@dataclass
class VersionMessage(Message):
    """U2F_VERSION command."""

    capacity: int = SELECT_CAPACITY


@dataclass
class VersionResult(Result):
    version: str | None = None


@dataclass
class RegisterMessage(Message):
    """U2F registration: challenge and application parameters, 32 bytes each."""

    challenge: bytes = b""
    application: bytes = b""
    capacity: int = RESPONSE_CAPACITY


@dataclass
class RegisterResult(Result):
    data: bytes = b""
    registration: Registration | None = None
    continuations: int = 0


@dataclass
class AuthenticateMessage(Message):
    """U2F authentication against a key handle from a prior registration."""

    challenge: bytes = b""
    application: bytes = b""
    key_handle: bytes = b""
    control: int = AUTH_ENFORCE
    capacity: int = RESPONSE_CAPACITY


@dataclass
class AuthenticateResult(Result):
    data: bytes = b""
    authentication: Authentication | None = None


@dataclass
class RawAPDUMessage(Message):
    """Send a raw APDU to the card."""

    cla: int = 0x00
    ins: int = 0x00
    p1: int = 0x00
    p2: int = 0x00
    data: bytes = b""
    le: int | None = None
    chained: bool = True
    capacity: int = RESPONSE_CAPACITY


@dataclass
class RawAPDUResult(Result):
    data: bytes = b""
