from __future__ import annotations

import logging

from smartcard.CardConnectionObserver import CardConnectionObserver

from fidoexp.core.smartcard.logging import PROTOCOL

lg = logging.getLogger(__name__)


class FieldObserver(CardConnectionObserver):
    """Logs field on/off transitions of a pyscard connection.

    APDU bytes are logged by the exchange itself, per call.
    """

    def update(self, observable, event):
        if event.type == "connect":
            lg.log(PROTOCOL, "field on")
        elif event.type == "reconnect":
            lg.log(PROTOCOL, "field reset")
        elif event.type == "disconnect":
            lg.log(PROTOCOL, "field off")
