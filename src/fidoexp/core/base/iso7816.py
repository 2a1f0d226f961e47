from __future__ import annotations

import logging
from collections.abc import Callable

from fidoexp.core.errors import StatusError
from fidoexp.core.smartcard import APDU, PROTOCOL, TRACE, Response, ResponseBuffer
from fidoexp.core.smartcard.logging import RESET, color_sw

lg = logging.getLogger(__name__)

INS_SELECT = 0xA4
INS_GET_RESPONSE = 0xC0

LINE_BYTES = 16


def _log_hex(prefix: str, data: bytes) -> None:
    """Log hex data at TRACE, wrapping at LINE_BYTES bytes per line."""
    pad = " " * len(prefix)
    for i in range(0, len(data), LINE_BYTES):
        chunk = data[i : i + LINE_BYTES].hex(" ").upper()
        lg.log(TRACE, "%s%s", prefix if i == 0 else pad, chunk)


class ISO7816:
    """ISO 7816-4 exchange and interindustry commands."""

    def __init__(self, transmit: Callable[[APDU], Response]) -> None:
        self._transmit = transmit

    def exchange(
        self,
        label: str,
        apdu: APDU,
        buffer: ResponseBuffer,
        *,
        check_sw: bool = True,
        log: bool = True,
    ) -> Response:
        """Transmit one APDU and append the response data to buffer.

        Transport failures propagate from the transmit callable. The data
        is stored before the status word is looked at; with check_sw a
        status other than 9000 then raises StatusError. ``log`` turns the
        command line and raw bytes on or off for this call only.
        """
        if log:
            _log_hex(">> ", apdu.to_bytes())
        resp = self._transmit(apdu)
        if log:
            if resp.data:
                _log_hex("<< ", resp.data)
            lg.log(PROTOCOL, "%s %s%04X%s", label, color_sw(resp.sw1), resp.sw, RESET)
        buffer.write(resp.data)
        if check_sw and not resp.success:
            raise StatusError(resp.sw, f"{label} failed: SW={resp.sw:04X}")
        return resp

    # -- commands --

    @staticmethod
    def select_apdu(aid: bytes, p1: int = 0x04, p2: int = 0x00) -> APDU:
        """SELECT (00 A4). P1=selection method, P2=response control."""
        if len(aid) > 255:
            raise ValueError(f"AID too long: {len(aid)} bytes")
        le: int | None = None if (p2 & 0x0C) == 0x0C else 0x00
        return APDU(cla=0x00, ins=INS_SELECT, p1=p1, p2=p2, data=aid, le=le)

    @staticmethod
    def get_response_apdu(le: int = 0x00) -> APDU:
        """GET RESPONSE (00 C0), Le=00 asks for everything available."""
        return APDU(cla=0x00, ins=INS_GET_RESPONSE, p1=0x00, p2=0x00, le=le)

    def send_get_response(
        self, buffer: ResponseBuffer, *, check_sw: bool = True, log: bool = True,
    ) -> Response:
        return self.exchange(
            "GET RESPONSE", self.get_response_apdu(), buffer,
            check_sw=check_sw, log=log,
        )
