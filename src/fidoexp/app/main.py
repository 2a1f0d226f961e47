# filename : main.py


import logging

from fidoexp.app.session import session

lg = logging.getLogger(__name__)


def main(
    commands: list[str] | None = None,
    file: str | None = None,
    interactive: bool = False,
    log_apdu: bool = True,
) -> bool:
    lg.debug("fidoexp v1")
    return session(
        commands=commands, file=file, interactive=interactive, log_apdu=log_apdu,
    )
