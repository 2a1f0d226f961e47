from __future__ import annotations

from dataclasses import dataclass

from fidoexp.core.errors import ExchangeStatus


@dataclass
class Message:
    """Base class for messages sent to a terminal.

    ``log`` controls APDU logging for the exchanges this message causes.
    """

    log: bool = True


@dataclass
class Result:
    """Base class for typed results from a terminal operation.

    ``status`` is the explicit outcome code; ``error`` carries the reason
    when it is not OK.
    """

    status: ExchangeStatus
    sw: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ExchangeStatus.OK
