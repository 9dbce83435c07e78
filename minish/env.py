"""The shell's own copy of the environment."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .models import ShellError


def _is_ascii_letter(ch: str) -> bool:
    return ("A" <= ch <= "Z") or ("a" <= ch <= "z")


def validate_name(key: str) -> str:
    """Return key if it is a valid variable name, else raise ShellError."""
    if not key or not _is_ascii_letter(key[0]):
        raise ShellError("setenv: Variable name must begin with a letter.")
    if not all(_is_ascii_letter(ch) or "0" <= ch <= "9" for ch in key[1:]):
        raise ShellError(
            "setenv: Variable name must contain alphanumeric characters."
        )
    return key


class Environment:
    """An ordered list of KEY=VALUE entries."""

    def __init__(self, entries: Iterable[str] | Mapping[str, str] = ()) -> None:
        if isinstance(entries, Mapping):
            self._entries = [f"{key}={value}" for key, value in entries.items()]
        else:
            self._entries = list(entries)

    @staticmethod
    def _matches(entry: str, key: str) -> bool:
        return entry.startswith(key + "=")

    def get(self, name: str) -> str | None:
        """Return the value of the first entry for name, or None."""
        prefix = len(name) + 1
        return next(
            (entry[prefix:] for entry in self._entries if self._matches(entry, name)),
            None,
        )

    def set(self, key: str, value: str | None) -> None:
        """Replace the first entry for key in place, or append a new one."""
        new_entry = f"{key}={'' if value is None else value}"
        for position, entry in enumerate(self._entries):
            if self._matches(entry, key):
                self._entries[position] = new_entry
                return
        self._entries.append(new_entry)

    def unset(self, key: str) -> None:
        """Remove every entry for key."""
        self._entries = [
            entry for entry in self._entries if not self._matches(entry, key)
        ]

    def lines(self) -> list[str]:
        """Return the entries in order, as printed by the env builtin."""
        return list(self._entries)

    def as_dict(self) -> dict[str, str]:
        """Return the entries as a mapping; the first entry for a key wins."""
        result: dict[str, str] = {}
        for entry in self._entries:
            key, sep, value = entry.partition("=")
            if sep:
                result.setdefault(key, value)
        return result

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)