from __future__ import annotations

import logging

from fidoexp.core.base import Agent, Terminal
from fidoexp.core.base.terminal import handles
from fidoexp.core.errors import ExchangeStatus
from fidoexp.core.fido.messages import (
    AuthenticateMessage,
    AuthenticateResult,
    RawAPDUMessage,
    RawAPDUResult,
    RegisterMessage,
    RegisterResult,
    SelectMessage,
    SelectResult,
    VersionMessage,
    VersionResult,
)
from fidoexp.core.fido.protocol import FIDO
from fidoexp.core.fido.responses import (
    check_registration,
    parse_authentication,
    parse_registration,
)
from fidoexp.core.smartcard import APDU, SW_SUCCESS, ResponseBuffer

lg = logging.getLogger(__name__)


def _status_failure(sw: int) -> dict:
    return {
        "status": ExchangeStatus.STATUS_ERROR,
        "sw": sw,
        "error": f"card returned SW={sw:04X}",
    }


def _decode_version(data: bytes) -> str:
    return data.decode("ascii", errors="replace").rstrip("\x00")


class FIDOTerminal(Terminal):
    """Terminal for FIDO U2F authenticators over ISO 7816.

    A status word other than 9000 comes back as STATUS_ERROR with the
    response body; transport, overflow and malformed-response failures
    are raised by the core and mapped by Terminal.send.
    """

    def __init__(self, agent: Agent) -> None:
        super().__init__(agent)
        self._fido = FIDO(agent)

    @handles(SelectMessage, SelectResult)
    def _select(self, message: SelectMessage) -> SelectResult:
        buffer = ResponseBuffer(message.capacity)
        chain = self._fido.select(
            buffer,
            activate_field=message.activate_field,
            leave_field_on=message.leave_field_on,
            log=message.log,
        )
        if chain.sw != SW_SUCCESS:
            return SelectResult(data=buffer.data, **_status_failure(chain.sw))
        return SelectResult(
            status=ExchangeStatus.OK,
            sw=chain.sw,
            data=buffer.data,
            version=_decode_version(buffer.data),
            continuations=chain.continuations,
        )

    @handles(VersionMessage, VersionResult)
    def _version(self, message: VersionMessage) -> VersionResult:
        buffer = ResponseBuffer(message.capacity)
        chain = self._fido.version(buffer, log=message.log)
        if chain.sw != SW_SUCCESS:
            return VersionResult(**_status_failure(chain.sw))
        return VersionResult(
            status=ExchangeStatus.OK, sw=chain.sw,
            version=_decode_version(buffer.data),
        )

    @handles(RegisterMessage, RegisterResult)
    def _register(self, message: RegisterMessage) -> RegisterResult:
        buffer = ResponseBuffer(message.capacity)
        chain = self._fido.register(
            message.challenge, message.application, buffer, log=message.log,
        )
        # A body that does not start with 05 is rejected whatever the SW.
        if buffer.length:
            check_registration(buffer.data)
        if chain.sw != SW_SUCCESS:
            return RegisterResult(data=buffer.data, **_status_failure(chain.sw))
        return RegisterResult(
            status=ExchangeStatus.OK,
            sw=chain.sw,
            data=buffer.data,
            registration=parse_registration(buffer.data),
            continuations=chain.continuations,
        )

    @handles(AuthenticateMessage, AuthenticateResult)
    def _authenticate(self, message: AuthenticateMessage) -> AuthenticateResult:
        buffer = ResponseBuffer(message.capacity)
        chain = self._fido.authenticate(
            message.challenge, message.application, message.key_handle,
            buffer, message.control, log=message.log,
        )
        if chain.sw != SW_SUCCESS:
            return AuthenticateResult(data=buffer.data, **_status_failure(chain.sw))
        return AuthenticateResult(
            status=ExchangeStatus.OK,
            sw=chain.sw,
            data=buffer.data,
            authentication=parse_authentication(buffer.data),
        )

    @handles(RawAPDUMessage, RawAPDUResult)
    def _raw_apdu(self, message: RawAPDUMessage) -> RawAPDUResult:
        apdu = APDU(message.cla, message.ins, message.p1, message.p2,
                    message.data, message.le)
        buffer = ResponseBuffer(message.capacity)
        if message.chained:
            sw = self._fido.exchange(apdu, buffer, log=message.log).sw
        else:
            sw = self._fido.exchange_single(apdu, buffer, log=message.log)
        status = ExchangeStatus.OK if sw == SW_SUCCESS else ExchangeStatus.STATUS_ERROR
        return RawAPDUResult(status=status, sw=sw, data=buffer.data)
