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
from fidoexp.core.fido.protocol import (
    AUTH_CHECK_ONLY,
    AUTH_DONT_ENFORCE,
    AUTH_ENFORCE,
    FIDO,
    FIDO_AID,
    SW_CONDITIONS_NOT_SATISFIED,
    SW_WRONG_DATA,
    U2F_VERSION,
)
from fidoexp.core.fido.responses import (
    Authentication,
    Registration,
    parse_authentication,
    parse_registration,
)
from fidoexp.core.fido.terminal import FIDOTerminal

__all__ = [
    "AUTH_CHECK_ONLY",
    "AUTH_DONT_ENFORCE",
    "AUTH_ENFORCE",
    "AuthenticateMessage",
    "AuthenticateResult",
    "Authentication",
    "FIDO",
    "FIDOTerminal",
    "FIDO_AID",
    "RawAPDUMessage",
    "RawAPDUResult",
    "RegisterMessage",
    "RegisterResult",
    "Registration",
    "SW_CONDITIONS_NOT_SATISFIED",
    "SW_WRONG_DATA",
    "SelectMessage",
    "SelectResult",
    "U2F_VERSION",
    "VersionMessage",
    "VersionResult",
    "parse_authentication",
    "parse_registration",
]
