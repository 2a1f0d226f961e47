from __future__ import annotations

from fidoexp.core.errors import TransportError
from fidoexp.core.smartcard import APDU, Response


class FakeCard:
    """Scripted transceiver: answers each transmit with the next response.

    A script entry is either (data, sw) or an exception instance to raise.
    Sent APDUs are recorded in ``sent``. Readers listed in ``dead_readers``
    have no card: connecting to them raises TransportError.
    """

    def __init__(self, script=(), readers=("Fake Reader 0",), dead_readers=()) -> None:
        self.script = list(script)
        self.readers = list(readers)
        self.sent: list[APDU] = []
        self.connected = False
        self.connects = 0
        self.disconnects = 0
        self.dead_readers = set(dead_readers)
        self.reader = None

    def list_readers(self):
        return self.readers

    def connect(self, reader) -> None:
        if reader in self.dead_readers:
            raise TransportError(f"no card on {reader}")
        self.reader = reader
        self.connected = True
        self.connects += 1

    def disconnect(self) -> None:
        if self.connected:
            self.disconnects += 1
        self.connected = False

    def get_uid(self) -> bytes | None:
        return bytes.fromhex("04A1B2C3")

    def get_atr(self) -> bytes:
        return bytes.fromhex("3B8F8001804F0CA0000003060300030000000068")

    def transmit(self, apdu: APDU) -> Response:
        if not self.connected:
            raise TransportError("not connected to a card")
        self.sent.append(apdu)
        if not self.script:
            raise TransportError("card removed")
        entry = self.script.pop(0)
        if isinstance(entry, Exception):
            raise entry
        data, sw = entry
        return Response(data=bytes(data), sw1=sw >> 8, sw2=sw & 0xFF)

