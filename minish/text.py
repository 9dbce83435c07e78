"""String helpers: trimming, quote handling and tokenising."""

from __future__ import annotations

import re

from .models import RedirectionKind

_SPACE = " \t\n\r\f\v"
_ARG_SPACE = " \t"
_QUOTES = "\"'"


def trim_whitespace(text: str) -> str:
    """Return text without leading and trailing ASCII whitespace."""
    return text.strip(_SPACE)


def strip_quotes(text: str) -> str:
    """Remove one pair of matching quotes wrapping the whole text."""
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    return text


def _split_on_any(text: str, delimiters: str) -> list[str]:
    """Split on any of the delimiter characters, dropping empty pieces."""
    if not delimiters:
        return [text] if text else []
    pattern = "[" + re.escape(delimiters) + "]+"
    return [piece for piece in re.split(pattern, text) if piece]


def split_string(text: str, delimiters: str) -> list[str]:
    """Split on any delimiter character and strip quotes from each piece."""
    return [strip_quotes(piece) for piece in _split_on_any(text, delimiters)]


def split_by_delimiter(text: str, delimiters: str) -> list[str]:
    """Split on any delimiter character and trim each piece.

    Pieces holding only whitespace come back as empty strings, while
    adjacent delimiters produce no piece at all.
    """
    return [trim_whitespace(piece) for piece in _split_on_any(text, delimiters)]


def split_args_respecting_quotes(text: str) -> list[str]:
    """Split a command line into arguments.

    Spaces and tabs separate arguments except inside single or double
    quotes; the quote characters themselves are removed.
    """
    args: list[str] = []
    current: list[str] = []
    in_token = False
    quote: str | None = None
    for ch in text:
        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
        elif ch in _QUOTES:
            quote = ch
            in_token = True
        elif ch in _ARG_SPACE:
            if in_token:
                args.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(ch)
            in_token = True
    if in_token:
        args.append("".join(current))
    return args


def is_redirection(token: str) -> bool:
    """Tell whether token is one of the redirection operators."""
    return any(token == kind.value for kind in RedirectionKind)