"""Exchange result codes and the exceptions that carry them."""

from __future__ import annotations

from enum import IntEnum


class ExchangeStatus(IntEnum):
    """Outcome of an operation, as reported in terminal results."""

    OK = 0
    TRANSPORT_ERROR = 1
    STATUS_ERROR = 5
    MALFORMED_RESPONSE = 6
    BUFFER_OVERFLOW = 100
    CIPHER_KEY_ERROR = 101
    CIPHER_OPERATION_ERROR = 102


class FidoError(Exception):
    """Base class for all errors raised by the core."""

    status = ExchangeStatus.TRANSPORT_ERROR


class TransportError(FidoError):
    """The transceiver could not complete an exchange."""

    status = ExchangeStatus.TRANSPORT_ERROR


class StatusError(FidoError):
    """The card answered with a status word other than 9000."""

    status = ExchangeStatus.STATUS_ERROR

    def __init__(self, sw: int, message: str | None = None) -> None:
        super().__init__(message or f"SW={sw:04X}")
        self.sw = sw


class BufferOverflowError(FidoError):
    """A write would exceed the capacity of a response buffer."""

    status = ExchangeStatus.BUFFER_OVERFLOW


class MalformedResponseError(FidoError):
    """A fixed field of a response does not hold its expected value."""

    status = ExchangeStatus.MALFORMED_RESPONSE


class CipherError(FidoError):
    status = ExchangeStatus.CIPHER_OPERATION_ERROR


class CipherKeyError(CipherError):
    """Key schedule failed (wrong key size or type)."""

    status = ExchangeStatus.CIPHER_KEY_ERROR


class CipherOperationError(CipherError):
    """Block operation failed (bad IV or bad data length)."""

    status = ExchangeStatus.CIPHER_OPERATION_ERROR
