from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import CardConnectionException, NoCardException
from smartcard.System import readers

from fidoexp.core.errors import TransportError
from fidoexp.core.smartcard.observer import FieldObserver
from fidoexp.core.smartcard.types import APDU, Response

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)


class Card:
    """PC/SC transceiver built on pyscard.

    Connecting powers the contactless field, disconnecting drops it.
    Every pyscard failure during an exchange surfaces as TransportError.
    """

    def __init__(self) -> None:
        self._connection: CardConnection | None = None
        self._observer = FieldObserver()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def connect(self, reader: Reader) -> None:
        connection = reader.createConnection()
        connection.addObserver(self._observer)
        try:
            connection.connect()
        except (CardConnectionException, NoCardException) as exc:
            connection.deleteObserver(self._observer)
            raise TransportError(f"{reader}: {exc}") from exc
        self._connection = connection

    def disconnect(self) -> None:
        if self._connection is not None:
            try:
                self._connection.disconnect()
            except CardConnectionException as exc:
                lg.debug("disconnect failed: %s", exc)
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def get_uid(self) -> bytes | None:
        """Get the UID of a contactless card via PC/SC pseudo-APDU FF CA 00 00."""
        data, sw1, sw2 = self._raw_transmit([0xFF, 0xCA, 0x00, 0x00, 0x00])
        if sw1 == 0x90 and sw2 == 0x00:
            return bytes(data)
        return None

    def get_atr(self) -> bytes:
        if self._connection is None:
            raise TransportError("not connected to a card")
        return bytes(self._connection.getATR())

    def transmit(self, apdu: APDU) -> Response:
        data, sw1, sw2 = self._raw_transmit(list(apdu.to_bytes()))
        return Response(data=bytes(data), sw1=sw1, sw2=sw2)

    def _raw_transmit(self, command: list[int]) -> tuple[list[int], int, int]:
        if self._connection is None:
            raise TransportError("not connected to a card")
        try:
            return self._connection.transmit(command)
        except (CardConnectionException, NoCardException) as exc:
            raise TransportError(str(exc)) from exc
