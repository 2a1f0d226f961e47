from __future__ import annotations

from dataclasses import dataclass

SW_SUCCESS = 0x9000
SW1_MORE_DATA = 0x61


@dataclass
class APDU:
    """ISO 7816 command APDU, short encoding only."""

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes = b""
    le: int | None = None

    def to_bytes(self) -> bytes:
        if len(self.data) > 255:
            raise ValueError(f"command data too long: {len(self.data)} bytes")
        if self.le is not None and not 0 <= self.le <= 256:
            raise ValueError(f"Le out of range: {self.le}")
        buf = bytearray([self.cla, self.ins, self.p1, self.p2])
        if self.data:
            buf.append(len(self.data))
            buf.extend(self.data)
        if self.le is not None:
            buf.append(0x00 if self.le == 256 else self.le)
        return bytes(buf)

    def __repr__(self) -> str:
        return self.to_bytes().hex(" ").upper()


@dataclass
class Response:
    """ISO 7816 response APDU."""

    data: bytes
    sw1: int
    sw2: int

    @property
    def sw(self) -> int:
        return (self.sw1 << 8) | self.sw2

    @property
    def success(self) -> bool:
        return self.sw == SW_SUCCESS

    @property
    def more_data(self) -> bool:
        """True for 61xx: the card holds more response bytes."""
        return self.sw1 == SW1_MORE_DATA

    @property
    def remaining(self) -> int:
        """Bytes announced by a 61xx status, 0 meaning up to 256."""
        return self.sw2 if self.more_data else 0

    def __repr__(self) -> str:
        sw = f"SW={self.sw:04X}"
        if self.data:
            return f"{self.data.hex(' ').upper()} {sw}"
        return sw
