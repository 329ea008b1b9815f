"""
Headless console - drive a tuning session from the terminal.

Commands:
  set <key> <value>   move one slider (e.g. "set hueMin 40")
  name <name>         change the pending colour name
  commit [name]       save the current bounds on the server
  show                print every slider and the snippet
  quit                leave
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..session import TunerSession

logger = logging.getLogger(__name__)


class TunerConsole:
    """Line-oriented front end for machines without a display."""

    def __init__(self, session: TunerSession, stream=None):
        self.session = session
        self.stream = stream or sys.stdout

    def _print(self, text: str = ""):
        print(text, file=self.stream)

    async def run(self, reader=None):
        """Read commands until EOF or 'quit'.

        Args:
            reader: Blocking callable returning one line ('' at EOF).
                Runs in the default executor. Defaults to stdin.
        """
        reader = reader or sys.stdin.readline
        loop = asyncio.get_running_loop()
        self._print(__doc__.strip().split("\n\n", 1)[1])
        while True:
            line = await loop.run_in_executor(None, reader)
            if not line:
                break
            if not await self.execute(line):
                break

    async def execute(self, line: str) -> bool:
        """Run one command. Returns False when the console should exit."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        if command in ("quit", "exit", "q"):
            return False
        if command == "set":
            self._set(rest)
        elif command == "name":
            self.session.on_name_input(rest)
            self._print(self.session.engine.snippet)
        elif command == "commit":
            await self.session.commit(rest if rest else None)
        elif command == "show":
            self.show()
        else:
            self._print(f"Unknown command: {command}")
        return True

    def show(self):
        """Print every slider pair and the snippet."""
        engine = self.session.engine
        for pair in self.session.state.pairs:
            self._print(
                f"{pair.lower_key:>8} {engine.readout(pair.lower_key):>3}   "
                f"{pair.upper_key:>8} {engine.readout(pair.upper_key):>3}   (0-{pair.limit})"
            )
        self._print(engine.snippet)

    def _set(self, args: str):
        try:
            key, raw = args.split()
            value = int(raw)
        except ValueError:
            self._print("Usage: set <key> <value>")
            return
        if key not in self.session.state:
            self._print(f"Unknown slider: {key}")
            return
        for write_key, write_value in self.session.on_slider_input(key, value):
            self._print(f"{write_key} = {write_value}")
