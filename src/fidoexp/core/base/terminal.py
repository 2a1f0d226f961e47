"""Message dispatch from the app layer to card operations."""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from fidoexp.core.base.agent import Agent
from fidoexp.core.base.message import Message, Result
from fidoexp.core.errors import FidoError

lg = logging.getLogger(__name__)


class _Route(NamedTuple):
    handler: str
    result_cls: type[Result]


def handles(message_cls: type[Message], result_cls: type[Result]) -> Callable:
    """Mark a method as the handler turning message_cls into result_cls."""

    def decorator(method: Callable) -> Callable:
        method._route = (message_cls, result_cls)
        return method

    return decorator


class Terminal:
    """Drives card operations through an Agent, one message at a time.

    Handlers may raise FidoError; send() turns it into a result of the
    declared type carrying the error's status code, so callers always get
    a result and never an exception from the core.
    """

    _routes: dict[type[Message], _Route] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        routes = dict(cls._routes)
        for name, attr in vars(cls).items():
            route = getattr(attr, "_route", None)
            if route is not None:
                message_cls, result_cls = route
                routes[message_cls] = _Route(name, result_cls)
        cls._routes = routes

    def __init__(self, agent: Agent) -> None:
        self._agent = agent

    @property
    def agent(self) -> Agent:
        return self._agent

    def connect(self) -> None:
        self._agent.connect()

    def disconnect(self) -> None:
        self._agent.disconnect()

    def send(self, message: Message) -> Result:
        route = self._routes.get(type(message))
        if route is None:
            raise ValueError(f"unsupported message: {type(message).__name__}")
        try:
            return getattr(self, route.handler)(message)
        except FidoError as exc:
            lg.debug("%s: %s", type(message).__name__, exc)
            return route.result_cls(
                status=exc.status, sw=getattr(exc, "sw", None), error=str(exc),
            )

    def on_error(self, error: Exception) -> None:
        """Report an error that ended a session."""
        lg.error("terminal error: %s", error)
