"""Session commands: field control, settings, help and raw APDUs."""

from __future__ import annotations

import logging

from fidoexp.core.fido import RawAPDUMessage

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = {"apdu", "set"}


def _is_true(value: str) -> bool:
    return value.lower() in ("true", "yes", "1")


def _set_log(runner, value: str) -> None:
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        lg.warning("unknown log level: %s", value)
        return
    logging.getLogger().setLevel(level)
    lg.info("log = %s", value.upper())


def _set_stop_on_error(runner, value: str) -> None:
    runner.stop_on_error = _is_true(value)
    lg.info("stop_on_error = %s", runner.stop_on_error)


def _set_log_apdu(runner, value: str) -> None:
    runner.log_apdu = _is_true(value)
    lg.info("log_apdu = %s", runner.log_apdu)


_settings: dict[str, callable] = {
    "log": _set_log,
    "stop_on_error": _set_stop_on_error,
    "log_apdu": _set_log_apdu,
}


def cmd_help(runner) -> bool:
    """List available commands."""
    lines = [f"  {name:20s} {runner.describe(name)}" for name in sorted(runner.commands)]
    lg.info("Commands:\n%s", "\n".join(lines))
    return True


def cmd_set(runner, **kwargs: str) -> bool:
    """Change a setting (log=LEVEL, stop_on_error=BOOL, log_apdu=BOOL)."""
    ok = True
    for key, value in kwargs.items():
        handler = runner.settings.get(key)
        if handler is None:
            lg.warning("unknown setting: %s", key)
            ok = False
        else:
            handler(runner, value)
    return ok


def cmd_connect(runner) -> bool:
    """Connect to the card (field on)."""
    runner.terminal.connect()
    return True


def cmd_disconnect(runner) -> bool:
    """Disconnect the card (field off)."""
    runner.terminal.disconnect()
    return True


def cmd_reconnect(runner) -> bool:
    """Drop the field and connect again."""
    runner.terminal.disconnect()
    runner.terminal.connect()
    return True


def cmd_apdu(
    runner, *, apdu: str = "", cla: str = "", ins: str = "", p1: str = "",
    p2: str = "", data: str = "", le: str = "", chain: str = "true",
) -> bool:
    """Send a raw APDU (apdu=HEX or cla/ins/p1/p2/data/le, all hex)."""
    chained = _is_true(chain)
    if apdu:
        raw = bytes.fromhex(apdu)
        if len(raw) < 4:
            lg.error("APDU too short: need at least 4 bytes (CLA INS P1 P2)")
            return False
        body = raw[4:]
        le_byte: int | None = None
        if len(body) == 1:
            le_byte = body[0]
            body = b""
        elif body:
            lc = body[0]
            if len(body) == lc + 2:
                le_byte = body[-1]
            elif len(body) != lc + 1:
                lg.error("Lc=%02X does not match %d data bytes", lc, len(body) - 1)
                return False
            body = body[1 : 1 + lc]
        msg = RawAPDUMessage(
            cla=raw[0], ins=raw[1], p1=raw[2], p2=raw[3],
            data=body, le=le_byte, chained=chained, log=runner.log_apdu,
        )
    else:
        msg = RawAPDUMessage(
            cla=int(cla, 16), ins=int(ins, 16),
            p1=int(p1, 16), p2=int(p2, 16),
            data=bytes.fromhex(data) if data else b"",
            le=int(le, 16) if le else None,
            chained=chained,
            log=runner.log_apdu,
        )
    result = runner.terminal.send(msg)
    if result.sw is None:
        lg.error("APDU failed: %s (%s)", result.error, result.status.name)
        return False
    lg.info("<< %s SW=%04X", result.data.hex(" ").upper() if result.data else "", result.sw)
    return (result.sw >> 8) == 0x90
