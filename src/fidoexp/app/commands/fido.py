"""FIDO U2F commands."""

from __future__ import annotations

import logging

from fidoexp.app.cardinfo import format_card_info
from fidoexp.core.crypto import sha256
from fidoexp.core.errors import FidoError
from fidoexp.core.fido import (
    AUTH_CHECK_ONLY,
    AUTH_ENFORCE,
    SW_CONDITIONS_NOT_SATISFIED,
    SW_WRONG_DATA,
    U2F_VERSION,
    AuthenticateMessage,
    RegisterMessage,
    SelectMessage,
    VersionMessage,
)

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = {"register", "authenticate"}


def _param(hex_value: str, text: str, name: str) -> bytes:
    """32-byte parameter: explicit hex, else SHA-256 of text."""
    if hex_value:
        return bytes.fromhex(hex_value)
    if not text:
        lg.debug("%s not given, using all zeros", name)
        return b"\x00" * 32
    return sha256(text.encode("utf-8"))


def _is_true(value: bool | str) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "yes", "1")
    return bool(value)


def _select(runner, *, activate: bool, leave_on: bool, log: bool):
    result = runner.terminal.send(SelectMessage(
        activate_field=activate, leave_field_on=leave_on, log=log,
    ))
    if result.sw is None:
        lg.error("APDU exchange error: %s", result.error)
        return None
    if not result.ok:
        lg.error("not a FIDO card, SELECT returned SW=%04X", result.sw)
        return None
    runner.info.version = result.version
    return result


def cmd_info(runner) -> bool:
    """Select the FIDO applet on a fresh field and report the version."""
    try:
        runner.info.uid = runner.terminal.agent.get_uid()
        runner.info.atr = runner.terminal.agent.get_atr()
    except FidoError as exc:
        lg.debug("card identity not available: %s", exc)
    # Field is dropped afterwards and the exchange is not traced.
    result = _select(runner, activate=True, leave_on=False, log=False)
    if result is None:
        return False
    if result.version != U2F_VERSION:
        lg.warning("FIDO authenticator with unexpected version: %s",
                   result.data.hex(" ").upper())
        return True
    lg.info("FIDO authenticator detected, version: %s", result.version)
    return True


def cmd_select(runner, *, activate: bool = False, leave_on: bool = True) -> bool:
    """SELECT the FIDO applet (A0 00 00 06 47 2F 00 01)."""
    result = _select(runner, activate=_is_true(activate),
                     leave_on=_is_true(leave_on), log=runner.log_apdu)
    if result is None:
        return False
    lg.info("SELECT SW=%04X version=%s", result.sw, result.version)
    return True


def cmd_version(runner) -> bool:
    """Send U2F_VERSION."""
    result = runner.terminal.send(VersionMessage(log=runner.log_apdu))
    if not result.ok:
        lg.error("VERSION failed: %s", result.error)
        return False
    runner.info.version = result.version
    lg.info("version: %s", result.version)
    return True


def cmd_register(
    runner, *, challenge: str = "", application: str = "",
    client_data: str = "", app_id: str = "",
) -> bool:
    """U2F registration (challenge/application hex, or client_data/app_id text)."""
    msg = RegisterMessage(
        challenge=_param(challenge, client_data, "challenge"),
        application=_param(application, app_id, "application"),
        log=runner.log_apdu,
    )
    if _select(runner, activate=True, leave_on=True, log=runner.log_apdu) is None:
        return False
    result = runner.terminal.send(msg)
    if not result.ok:
        lg.error("REGISTER failed: %s (%s)", result.error, result.status.name)
        return False
    reg = result.registration
    runner.info.registration = reg
    lg.info("data len: %d", len(result.data))
    lg.info("user public key: %s", reg.public_key.hex().upper())
    lg.info("key handle[%d]: %s", len(reg.key_handle), reg.key_handle.hex().upper())
    lg.info("DER certificate[%d]: %s...", len(reg.certificate),
            reg.certificate[:20].hex().upper())
    lg.info("signature[%d]: %s", len(reg.signature), reg.signature.hex().upper())
    return True


def cmd_authenticate(
    runner, *, challenge: str = "", application: str = "",
    client_data: str = "", app_id: str = "", key_handle: str = "",
    control: str = "",
) -> bool:
    """U2F authentication with key_handle=HEX (default: last registration)."""
    if key_handle:
        handle = bytes.fromhex(key_handle)
    elif runner.info.registration is not None:
        handle = runner.info.registration.key_handle
    else:
        lg.error("no key handle: pass key_handle=HEX or run register first")
        return False
    msg = AuthenticateMessage(
        challenge=_param(challenge, client_data, "challenge"),
        application=_param(application, app_id, "application"),
        key_handle=handle,
        control=int(control, 16) if control else AUTH_ENFORCE,
        log=runner.log_apdu,
    )
    if _select(runner, activate=True, leave_on=True, log=runner.log_apdu) is None:
        return False
    result = runner.terminal.send(msg)
    if msg.control == AUTH_CHECK_ONLY and result.sw == SW_CONDITIONS_NOT_SATISFIED:
        lg.info("key handle belongs to this authenticator")
        return True
    if result.sw == SW_WRONG_DATA:
        lg.error("key handle not recognized by this authenticator")
        return False
    if not result.ok:
        lg.error("AUTHENTICATE failed: %s (%s)", result.error, result.status.name)
        return False
    auth = result.authentication
    runner.info.authentication = auth
    lg.info("user presence: %02X counter: %d", auth.user_presence, auth.counter)
    lg.info("signature[%d]: %s", len(auth.signature), auth.signature.hex().upper())
    return True


def cmd_display(runner) -> bool:
    """Display collected card information."""
    lg.info("\n%s", format_card_info(runner.info))
    return True
