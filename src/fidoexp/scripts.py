# filename : scripts.py


import logging
import sys

import click

from fidoexp.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw APDUs).")
@click.option(
    "-c",
    "--command",
    "commands",
    multiple=True,
    help="Command to run, e.g. -c info -c register (repeatable).",
)
@click.option(
    "-f",
    "--file",
    "file",
    type=click.Path(exists=True),
    default=None,
    help="Run commands from a script file.",
)
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Interactive REPL (default when no command or file is given).",
)
@click.option(
    "--no-apdu-log",
    is_flag=True,
    help="Do not log raw APDU bytes for this session.",
)
def fidoexp(verbose, commands, file, interactive, no_apdu_log):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    from fidoexp.app.main import main
    ok = main(
        commands=list(commands),
        file=file,
        interactive=interactive,
        log_apdu=not no_apdu_log,
    )
    sys.exit(0 if ok else 1)
