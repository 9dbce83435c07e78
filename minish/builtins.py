"""Commands the shell runs itself: cd, exit, env, setenv, unsetenv and 42."""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass, field
from typing import TextIO

from .env import Environment, validate_name
from .models import ShellError, ShellExit

_BUILTINS = frozenset({"cd", "exit", "env", "setenv", "unsetenv", "42"})


@dataclass
class ShellState:
    """What the shell keeps between commands."""

    env: Environment
    prev_dir: str = ""
    stdin: TextIO = field(default_factory=lambda: sys.stdin)


def is_builtin(name: str) -> bool:
    """Tell whether name is a command the shell runs itself."""
    return name in _BUILTINS


def _report(error: Exception) -> None:
    sys.stderr.write(f"{error}\n")


def _print_env(env: Environment, stdout: TextIO) -> None:
    for line in env.lines():
        stdout.write(line + "\n")


def validate_setenv_args(args: list[str]) -> None:
    """Raise ShellError if the setenv arguments are unusable."""
    if len(args) < 2:
        raise ShellError("setenv: missing variable name.")
    validate_name(args[1])
    if len(args) > 3:
        raise ShellError("setenv: too many arguments.")


def check_cd_target(args: list[str]) -> str:
    """Return the cd target if it is usable, else raise ShellError."""
    if len(args) > 2:
        raise ShellError("cd: Too many arguments.")
    path = args[1]
    try:
        mode = os.stat(path).st_mode
    except OSError:
        raise ShellError(f"{path}: No such file or directory.") from None
    if not stat.S_ISDIR(mode):
        raise ShellError(f"{path}: Not a directory.")
    if not os.access(path, os.X_OK):
        raise ShellError(f"cd: {path}: Permission denied.")
    return path


def change_directory(args: list[str], state: ShellState, stdout: TextIO) -> bool:
    """Run cd; return False only when the directory change itself failed.

    Raises ShellError for an unusable target.
    """
    path = args[1] if len(args) > 1 else None
    if path is None:
        path = state.env.get("HOME")
        if path is None:
            stdout.write("cd: HOME not set\n")
            return True
    elif path == "-":
        if not state.prev_dir:
            raise ShellError(": No such file or directory.")
        path = state.prev_dir
        stdout.write(path + "\n")
    else:
        check_cd_target(args)
    state.env.set("OLDPWD", state.prev_dir)
    try:
        current = os.getcwd()
    except OSError as error:
        sys.stderr.write(f"cd error: getcwd failed: {error.strerror}\n")
        return False
    try:
        os.chdir(path)
    except OSError as error:
        sys.stderr.write(f"cd error: {error.strerror}\n")
        return False
    state.prev_dir = current
    return True


def run_builtin(args: list[str], state: ShellState, stdout: TextIO) -> bool:
    """Run args if it names a builtin; return whether it was handled."""
    if not args or not is_builtin(args[0]):
        return False
    name = args[0]
    try:
        if name == "cd":
            return change_directory(args, state, stdout)
        if name == "exit":
            stdout.write("Exiting shell...\n")
            stdout.flush()
            raise ShellExit(0)
        if name == "env":
            _print_env(state.env, stdout)
        elif name == "setenv":
            if len(args) < 2:
                _print_env(state.env, stdout)
            else:
                validate_setenv_args(args)
                state.env.set(args[1], args[2] if len(args) > 2 else "")
        elif name == "unsetenv":
            if len(args) < 2:
                raise ShellError("unsetenv: Too few arguments.")
            state.env.unset(args[1])
        else:
            stdout.write("Life, the Universe and Everything")
    except ShellError as error:
        _report(error)
    return True