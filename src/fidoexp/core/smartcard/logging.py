from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"


def color_sw(sw1: int) -> str:
    """Return ANSI color for a status word: green for success, red for error."""
    if sw1 == 0x90 or sw1 == 0x61:
        return GREEN
    return RED
