from fidoexp.core.smartcard.buffer import ResponseBuffer
from fidoexp.core.smartcard.logging import PROTOCOL, TRACE
from fidoexp.core.smartcard.types import APDU, SW1_MORE_DATA, SW_SUCCESS, Response

__all__ = [
    "APDU",
    "PROTOCOL",
    "Response",
    "ResponseBuffer",
    "SW1_MORE_DATA",
    "SW_SUCCESS",
    "TRACE",
]
