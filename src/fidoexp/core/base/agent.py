from __future__ import annotations

import logging
from typing import Any, Protocol

from fidoexp.core.errors import TransportError
from fidoexp.core.smartcard import APDU, Response

lg = logging.getLogger(__name__)


class Transceiver(Protocol):
    """Link layer that moves raw APDUs to and from a card."""

    @property
    def connected(self) -> bool: ...
    def list_readers(self) -> list[Any]: ...
    def connect(self, reader: Any) -> None: ...
    def disconnect(self) -> None: ...
    def get_uid(self) -> bytes | None: ...
    def get_atr(self) -> bytes: ...
    def transmit(self, apdu: APDU) -> Response: ...


class Agent:
    """Agent that manages the card field and APDU transmission.

    Protocol-specific operations live in standalone protocol classes
    (ISO7816, FIDO) that receive agent.transmit as a callable. Terminals
    construct the protocol objects they need.
    """

    def __init__(self, card: Transceiver) -> None:
        self._card = card

    @property
    def connected(self) -> bool:
        return self._card.connected

    def connect(self) -> None:
        """Discover a reader with a card present and connect (field on)."""
        available = self._card.list_readers()
        if not available:
            raise TransportError("no readers found")
        for reader in available:
            try:
                self._card.connect(reader)
                lg.info("connected to %s", reader)
                return
            except TransportError:
                lg.debug("no card on %s", reader)
        raise TransportError("no card found on any reader")

    def disconnect(self) -> None:
        """Disconnect from the card (field off)."""
        self._card.disconnect()

    def activate_field(self) -> None:
        """Power the field from scratch, dropping it first if it is on."""
        if self._card.connected:
            self._card.disconnect()
        self.connect()

    def get_uid(self) -> bytes | None:
        """Return the UID of a contactless card, or None if not available."""
        return self._card.get_uid()

    def get_atr(self) -> bytes:
        """Return the ATR of the connected card."""
        return self._card.get_atr()

    def transmit(self, apdu: APDU) -> Response:
        """Send one APDU and return the raw response."""
        return self._card.transmit(apdu)
