"""Software response chaining (61xx / GET RESPONSE)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from fidoexp.core.base.iso7816 import ISO7816
from fidoexp.core.errors import BufferOverflowError, StatusError, TransportError
from fidoexp.core.smartcard import APDU, SW1_MORE_DATA, Response, ResponseBuffer

lg = logging.getLogger(__name__)


class ChainState(Enum):
    INITIAL = "initial"
    CONTINUING = "continuing"
    DONE = "done"
    FAILED = "failed"


class ResponseChain:
    """Runs one command and fetches the rest of its response.

    After the initial exchange, every 61xx status (6100 included) triggers
    a GET RESPONSE that appends to the same buffer. The loop has no
    iteration limit: a card that keeps answering 61xx is stopped only by
    the buffer running out of room, which is detected before the write
    and ends the chain without any further exchange.

    Each exchange runs with status checking on, and a StatusError is
    absorbed here: the chain moves on the status word value alone.
    Transport and overflow failures reset the buffer and propagate.
    """

    def __init__(self, iso: ISO7816, *, log: bool = True) -> None:
        self._iso = iso
        self._log = log
        self.state = ChainState.INITIAL
        self.sw: int | None = None
        self.continuations = 0

    @staticmethod
    def _step(send: Callable[[], Response]) -> int:
        try:
            return send().sw
        except StatusError as exc:
            return exc.sw

    def run(self, label: str, apdu: APDU, buffer: ResponseBuffer) -> int:
        """Exchange apdu, follow 61xx chaining, return the final SW."""
        if self.state is not ChainState.INITIAL:
            raise RuntimeError(f"chain already {self.state.value}")
        try:
            self.sw = self._step(
                lambda: self._iso.exchange(label, apdu, buffer, log=self._log)
            )
            while (self.sw >> 8) == SW1_MORE_DATA:
                self.state = ChainState.CONTINUING
                self.continuations += 1
                lg.debug(
                    "chaining #%d at offset %d, card announces %02X",
                    self.continuations, buffer.length, self.sw & 0xFF,
                )
                self.sw = self._step(
                    lambda: self._iso.send_get_response(buffer, log=self._log)
                )
        except (BufferOverflowError, TransportError):
            self.state = ChainState.FAILED
            buffer.reset()
            raise
        self.state = ChainState.DONE
        return self.sw
