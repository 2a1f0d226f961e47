"""FIDO card session orchestrator.

Constructs the full stack (Card -> Agent -> Terminal -> Runner),
connects, runs commands, a script file or the REPL, and disconnects.
"""

from __future__ import annotations

import logging

from fidoexp.app.commands import COMMAND_MODULES
from fidoexp.app.runner import Runner
from fidoexp.core.base import Agent
from fidoexp.core.fido import FIDOTerminal
from fidoexp.core.smartcard.card import Card

lg = logging.getLogger(__name__)


def session(
    commands: list[str] | None = None,
    file: str | None = None,
    interactive: bool = False,
    log_apdu: bool = True,
) -> bool:
    """Open a FIDO card session. Returns True if every command succeeded."""
    card = Card()
    agent = Agent(card)
    terminal = FIDOTerminal(agent)
    runner = Runner(terminal, COMMAND_MODULES, log_apdu=log_apdu)

    ok = True
    try:
        terminal.connect()
        if commands:
            ok = runner.run_lines(commands)
        if ok and file:
            ok = runner.run_file(file)
        if interactive or not (commands or file):
            runner.run_interactive()
    except Exception as exc:
        terminal.on_error(exc)
        ok = False
    finally:
        terminal.disconnect()
    return ok
