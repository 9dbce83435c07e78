"""The read-parse-execute loop and the command entry point."""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Iterable, Mapping
from typing import TextIO

from .builtins import ShellState
from .env import Environment
from .executor import execute_commands
from .models import ShellExit
from .parser import ParseError, parse_input

PROMPT = "$> "


def process_input(line: str, state: ShellState) -> int:
    """Parse and run one input line; return the resulting status."""
    line = line.split("\n", 1)[0]
    if not line:
        return 0
    try:
        commands = parse_input(line)
    except ParseError as error:
        sys.stderr.write(f"{error}\n")
        return 0
    return execute_commands(commands, state)


def _on_sigint(signum, frame) -> None:
    sys.stdout.write("\n" + PROMPT)
    sys.stdout.flush()


def _interactive(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def shell_loop(environ: Mapping[str, str] | Iterable[str], stream: TextIO) -> int:
    """Read and run lines from stream until end of input or exit."""
    state = ShellState(Environment(environ), stdin=stream)
    in_main = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGINT, _on_sigint) if in_main else None
    last_status = 0
    try:
        while True:
            if _interactive(stream):
                sys.stdout.write(PROMPT)
                sys.stdout.flush()
            line = stream.readline()
            if not line:
                sys.stdout.write("\nExiting shell...\n")
                sys.stdout.flush()
                return last_status
            last_status = process_input(line, state)
    except ShellExit as leave:
        return leave.status
    finally:
        if in_main:
            signal.signal(signal.SIGINT, previous)


def main(argv: list[str] | None = None) -> int:
    """Start the shell on standard input with the process environment."""
    return shell_loop(os.environ, sys.stdin)


if __name__ == "__main__":
    sys.exit(main())