"""Data structures produced by the parser and consumed by the executor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union


class ShellError(Exception):
    """An error the shell reports on standard error before carrying on."""


class ShellExit(Exception):
    """Raised to leave the shell with the given exit status."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


class RedirectionKind(enum.Enum):
    """The redirection operators understood by the shell."""

    OUTPUT = ">"
    APPEND = ">>"
    INPUT = "<"
    HEREDOC = "<<"

    @staticmethod
    def from_token(token: str) -> "RedirectionKind":
        """Return the kind named by an operator token such as '>>'."""
        try:
            return RedirectionKind(token)
        except ValueError:
            raise ShellError(f"{token}: not a redirection operator") from None


@dataclass
class Redirection:
    """One redirection of a command; the filename is kept as typed."""

    kind: RedirectionKind
    filename: str


@dataclass
class SimpleCommand:
    """A command name with its arguments and redirections."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)


@dataclass
class Pipeline:
    """Simple commands connected by pipes, in order."""

    commands: list[SimpleCommand] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.commands)


Command = Union[SimpleCommand, Pipeline]