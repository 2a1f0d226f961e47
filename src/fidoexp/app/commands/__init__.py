from fidoexp.app.commands import crypto, fido, session

COMMAND_MODULES = [session, fido, crypto]

__all__ = ["COMMAND_MODULES"]
