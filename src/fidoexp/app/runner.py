"""Command runner: dispatches ``cmd_*`` functions from scripts or a prompt."""

from __future__ import annotations

import logging
import shlex
from types import ModuleType

from fidoexp.app.cardinfo import CardInfo
from fidoexp.core.errors import FidoError

lg = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"quit", "exit"})


def parse_value(s: str) -> int | str | bool:
    """Parse a command argument value.

    Returns bool for true/false literals, int for decimal or 0x-prefixed
    numbers, otherwise the raw string. Hex payloads stay strings.
    """
    low = s.lower()
    if low in ("true", "yes"):
        return True
    if low in ("false", "no"):
        return False
    if low.startswith("0x"):
        try:
            return int(s, 16)
        except ValueError:
            return s
    try:
        return int(s)
    except ValueError:
        return s


def parse_command(line: str) -> tuple[str, dict[str, str]] | None:
    """Split ``name key=value flag`` into (name, raw_kwargs), None if blank."""
    stripped = line.split("#", 1)[0].strip()
    if not stripped:
        return None
    name, *parts = shlex.split(stripped)
    kwargs: dict[str, str] = {}
    for part in parts:
        key, sep, value = part.partition("=")
        kwargs[key] = value if sep else "true"
    return name, kwargs


class Runner:
    """Session state shared by the shell commands.

    Each command module contributes ``cmd_*`` functions taking the runner
    as first argument, and optionally ``_raw_commands`` (names whose
    arguments stay strings) and ``_settings`` (handlers for ``set``).
    """

    def __init__(self, terminal, command_modules: list[ModuleType],
                 log_apdu: bool = True) -> None:
        self.terminal = terminal
        self.info = CardInfo()
        self.log_apdu = log_apdu
        self.stop_on_error = True
        self.commands: dict[str, callable] = {}
        self.settings: dict[str, callable] = {}
        self._raw_commands: set[str] = set()
        for mod in command_modules:
            for name in dir(mod):
                if name.startswith("cmd_"):
                    self.commands[name[4:]] = getattr(mod, name)
            self._raw_commands |= getattr(mod, "_raw_commands", set())
            self.settings.update(getattr(mod, "_settings", {}))

    def describe(self, name: str) -> str:
        return (self.commands[name].__doc__ or "").split("\n")[0].strip()

    def execute(self, line: str) -> bool:
        """Parse and execute one command line. Returns True on success."""
        parsed = parse_command(line)
        if parsed is None:
            return True
        name, raw_kwargs = parsed
        cmd = self.commands.get(name)
        if cmd is None:
            lg.error("unknown command: %s", name)
            return False
        if name in self._raw_commands:
            kwargs = raw_kwargs
        else:
            kwargs = {k: parse_value(v) for k, v in raw_kwargs.items()}
        try:
            return cmd(self, **kwargs)
        except TypeError as exc:
            lg.error("bad arguments for '%s': %s", name, exc)
        except (ValueError, FidoError) as exc:
            lg.error("command '%s' failed: %s", name, exc)
        return False

    def run_lines(self, lines: list[str], source: str = "<commands>") -> bool:
        """Execute command lines in order. Returns True if all succeed."""
        for i, line in enumerate(lines, 1):
            parsed = parse_command(line)
            if parsed and parsed[0] in EXIT_COMMANDS:
                break
            if not self.execute(line) and self.stop_on_error:
                lg.error("stopped at %s:%d: %s", source, i, line.strip())
                return False
        return True

    def run_file(self, path: str) -> bool:
        with open(path) as f:
            lines = f.readlines()
        return self.run_lines(lines, source=path)

    def run_interactive(self, prompt: str = "fidoexp> ") -> None:
        lg.info("interactive mode, type 'help' for commands, 'quit' to exit")
        while True:
            try:
                line = input(prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return
            parsed = parse_command(line)
            if parsed and parsed[0] in EXIT_COMMANDS:
                return
            self.execute(line)
