"""FIDO U2F over NFC: application selection and command builders."""

from __future__ import annotations

import logging

from fidoexp.core.base.agent import Agent
from fidoexp.core.base.chaining import ResponseChain
from fidoexp.core.base.iso7816 import ISO7816
from fidoexp.core.smartcard import APDU, ResponseBuffer

lg = logging.getLogger(__name__)

FIDO_AID = bytes.fromhex("A0000006472F0001")
U2F_VERSION = "U2F_V2"

INS_REGISTER = 0x01
INS_AUTHENTICATE = 0x02
INS_VERSION = 0x03

# AUTHENTICATE control byte (P1)
AUTH_ENFORCE = 0x03
AUTH_CHECK_ONLY = 0x07
AUTH_DONT_ENFORCE = 0x08

PARAM_SIZE = 32

# U2F status words
SW_CONDITIONS_NOT_SATISFIED = 0x6985
SW_WRONG_DATA = 0x6A80


def _check_param(name: str, value: bytes) -> None:
    if len(value) != PARAM_SIZE:
        raise ValueError(f"{name} must be {PARAM_SIZE} bytes, got {len(value)}")


class FIDO:
    """FIDO U2F protocol operations.

    Card commands go through the response chaining controller, so the
    buffer holds the full response once an operation returns.
    """

    def __init__(self, agent: Agent) -> None:
        self._agent = agent
        self._iso = ISO7816(agent.transmit)

    # -- command builders --

    @staticmethod
    def register_apdu(challenge: bytes, application: bytes) -> APDU:
        """REGISTER (00 01 03 00), Lc=64: challenge || application."""
        _check_param("challenge", challenge)
        _check_param("application", application)
        return APDU(
            cla=0x00, ins=INS_REGISTER, p1=0x03, p2=0x00,
            data=challenge + application, le=0x00,
        )

    @staticmethod
    def authenticate_apdu(
        challenge: bytes,
        application: bytes,
        key_handle: bytes,
        control: int = AUTH_ENFORCE,
    ) -> APDU:
        """AUTHENTICATE (00 02 P1 00): challenge || application || L || handle."""
        _check_param("challenge", challenge)
        _check_param("application", application)
        if len(key_handle) > 255 - 2 * PARAM_SIZE - 1:
            raise ValueError(f"key handle too long: {len(key_handle)} bytes")
        data = challenge + application + bytes([len(key_handle)]) + key_handle
        return APDU(
            cla=0x00, ins=INS_AUTHENTICATE, p1=control, p2=0x00,
            data=data, le=0x00,
        )

    @staticmethod
    def version_apdu() -> APDU:
        """VERSION (00 03 00 00)."""
        return APDU(cla=0x00, ins=INS_VERSION, p1=0x00, p2=0x00, le=0x00)

    # -- operations --

    def _run(
        self, label: str, apdu: APDU, buffer: ResponseBuffer, log: bool,
    ) -> ResponseChain:
        chain = ResponseChain(self._iso, log=log)
        chain.run(label, apdu, buffer)
        return chain

    def select(
        self,
        buffer: ResponseBuffer,
        *,
        activate_field: bool = True,
        leave_field_on: bool = True,
        log: bool = True,
    ) -> ResponseChain:
        """SELECT the FIDO applet.

        The card answers with its version string ("U2F_V2") in buffer.
        Unless leave_field_on, the field is dropped even on failure.
        """
        if activate_field:
            self._agent.activate_field()
        try:
            return self._run(
                f"SELECT {FIDO_AID.hex().upper()}",
                ISO7816.select_apdu(FIDO_AID), buffer, log,
            )
        finally:
            if not leave_field_on:
                self._agent.disconnect()

    def register(
        self, challenge: bytes, application: bytes, buffer: ResponseBuffer,
        *, log: bool = True,
    ) -> ResponseChain:
        return self._run(
            "REGISTER", self.register_apdu(challenge, application), buffer, log,
        )

    def authenticate(
        self,
        challenge: bytes,
        application: bytes,
        key_handle: bytes,
        buffer: ResponseBuffer,
        control: int = AUTH_ENFORCE,
        *,
        log: bool = True,
    ) -> ResponseChain:
        apdu = self.authenticate_apdu(challenge, application, key_handle, control)
        return self._run(f"AUTHENTICATE P1={control:02X}", apdu, buffer, log)

    def version(self, buffer: ResponseBuffer, *, log: bool = True) -> ResponseChain:
        return self._run("VERSION", self.version_apdu(), buffer, log)

    def exchange(
        self, apdu: APDU, buffer: ResponseBuffer, *, log: bool = True,
    ) -> ResponseChain:
        """Send an arbitrary APDU and follow 61xx chaining."""
        return self._run(f"APDU {apdu.cla:02X} {apdu.ins:02X}", apdu, buffer, log)

    def exchange_single(
        self, apdu: APDU, buffer: ResponseBuffer, *, log: bool = True,
    ) -> int:
        """Send an arbitrary APDU once; the SW is returned, never raised."""
        label = f"APDU {apdu.cla:02X} {apdu.ins:02X}"
        return self._iso.exchange(label, apdu, buffer, check_sw=False, log=log).sw
