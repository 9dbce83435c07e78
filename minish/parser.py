"""Turning an input line into commands and pipelines."""

from __future__ import annotations

import re

from .models import (
    Command,
    Pipeline,
    Redirection,
    RedirectionKind,
    ShellError,
    SimpleCommand,
)
from .text import is_redirection, split_args_respecting_quotes, split_by_delimiter

NULL_COMMAND = "Invalid null command."
MISSING_NAME = "Missing name for redirect"

_WORD_SEPARATOR = re.compile(r"[ \t]+")


class ParseError(ShellError):
    """The input line cannot be turned into commands."""


def parse_input(line: str) -> list[Command]:
    """Parse a whole line: groups separated by ';', each a command or pipeline."""
    return [
        parse_command_group(group)
        for group in split_by_delimiter(line, ";")
        if group
    ]


def parse_command_group(text: str) -> Command:
    """Parse one ';'-separated group into a simple command or a pipeline."""
    segments = split_by_delimiter(text, "|")
    if not segments or not all(segments):
        raise ParseError(NULL_COMMAND)
    if len(segments) > 1:
        return create_pipeline(segments)
    return parse_simple_command(segments[0])


def create_pipeline(segments: list[str]) -> Pipeline:
    """Build a pipeline from its '|'-separated segments."""
    return Pipeline([parse_simple_command(segment) for segment in segments])


def parse_simple_command(text: str) -> SimpleCommand:
    """Parse words and redirections of a single command.

    A redirection operator takes the next word as its file name; the
    remaining words are joined by single spaces and split into arguments.
    """
    words: list[str] = []
    redirections: list[Redirection] = []
    tokens = iter(word for word in _WORD_SEPARATOR.split(text) if word)
    for token in tokens:
        if is_redirection(token):
            filename = next(tokens, None)
            if filename is None:
                raise ParseError(MISSING_NAME)
            redirections.append(
                Redirection(RedirectionKind.from_token(token), filename)
            )
        else:
            words.append(token)
    return SimpleCommand(split_args_respecting_quotes(" ".join(words)), redirections)