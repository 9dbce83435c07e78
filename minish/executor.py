"""Running parsed commands and pipelines."""

from __future__ import annotations

import io
import os
import signal
import stat
import subprocess
import sys
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import IO, Iterator, TextIO, Union

from .builtins import ShellState, is_builtin, run_builtin
from .env import Environment
from .models import (
    Command,
    Pipeline,
    RedirectionKind,
    ShellError,
    ShellExit,
    SimpleCommand,
)
from .text import strip_quotes

HEREDOC_PROMPT = "heredoc> "

_SIGNAL_NAMES = {
    signal.SIGSEGV: "Segmentation fault",
    signal.SIGFPE: "Floating exception",
}


def find_executable(command: str, env: Environment) -> str:
    """Look command up in PATH; return it unchanged if not found there."""
    path = env.get("PATH")
    if path is None or "/" in command:
        return command
    for directory in (d for d in path.split(":") if d):
        candidate = f"{directory}/{command}"
        try:
            mode = os.stat(candidate).st_mode
        except OSError:
            continue
        if mode & stat.S_IXUSR:
            return candidate
    return command


def check_command_exists(command: str, env: Environment) -> bool:
    """Tell whether command can be run, reporting it when it cannot."""
    if not os.access(find_executable(command, env), os.X_OK):
        sys.stdout.write(f"{command}: Command not found.\n")
        return False
    return True


def read_heredoc(delimiter: str, stream: TextIO, prompt: TextIO | None) -> str:
    """Read lines from stream up to the delimiter line and return them."""
    delimiter = strip_quotes(delimiter)
    lines = []
    while True:
        if prompt is not None:
            prompt.write(HEREDOC_PROMPT)
            prompt.flush()
        line = stream.readline()
        if not line:
            break
        if line.endswith("\n"):
            line = line[:-1]
        if line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


def describe_signal(returncode: int) -> str | None:
    """Name the fatal signal behind a negative return code, if reported."""
    if returncode >= 0:
        return None
    return _SIGNAL_NAMES.get(-returncode)


def _finish(returncode: int) -> int:
    message = describe_signal(returncode)
    if message is not None:
        sys.stderr.write(message)
        sys.stderr.flush()
        sys.stdout.write("\n")
    return returncode if returncode >= 0 else 0


def _report(error: Exception) -> None:
    sys.stderr.write(f"{error}\n")


@dataclass
class _Streams:
    stdin: IO | None = None
    data: bytes | None = None
    stdout: TextIO | None = None


def _open(name: str, mode: str) -> IO:
    try:
        return open(name, mode)
    except OSError:
        raise ShellError(f"{name}: No such file or directory.") from None


@contextmanager
def _redirected(command: SimpleCommand, state: ShellState) -> Iterator[_Streams]:
    streams = _Streams()
    with ExitStack() as stack:
        for redirection in command.redirections:
            name = strip_quotes(redirection.filename)
            kind = redirection.kind
            if kind in (RedirectionKind.OUTPUT, RedirectionKind.APPEND):
                mode = "w" if kind is RedirectionKind.OUTPUT else "a"
                streams.stdout = stack.enter_context(_open(name, mode))
            elif kind is RedirectionKind.INPUT:
                streams.stdin = stack.enter_context(_open(name, "rb"))
                streams.data = None
            else:
                text = read_heredoc(redirection.filename, state.stdin, sys.stdout)
                streams.data = text.encode()
                streams.stdin = None
        yield streams


def _flush(*streams: TextIO | None) -> None:
    for stream in streams:
        if stream is not None:
            stream.flush()


def execute_simple_command(command: SimpleCommand, state: ShellState) -> int:
    """Run one command with its redirections and return its status."""
    try:
        with _redirected(command, state) as streams:
            args = [strip_quotes(arg) for arg in command.args]
            if not args:
                return 0
            if run_builtin(args, state, streams.stdout or sys.stdout):
                return 0
            path = find_executable(args[0], state.env)
            if not check_command_exists(path, state.env):
                return 1
            _flush(sys.stdout, streams.stdout)
            try:
                completed = subprocess.run(
                    [path, *args[1:]],
                    env=state.env.as_dict(),
                    stdin=streams.stdin,
                    input=streams.data,
                    stdout=streams.stdout,
                )
            except OSError as error:
                sys.stderr.write(f"{path}: {error.strerror}\n")
                return 1
            return _finish(completed.returncode)
    except ShellError as error:
        _report(error)
        return 1


_Upstream = Union[bytes, IO, None]


def _feed(pipe: IO, data: bytes) -> None:
    try:
        pipe.write(data)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except OSError:
            pass


def _run_in_process(args: list[str], state: ShellState, out: TextIO) -> int:
    """Run a stage inside the shell, isolated as a forked child would be."""
    if not args:
        return 0
    child = ShellState(Environment(state.env.lines()), state.prev_dir, state.stdin)
    try:
        if run_builtin(args, child, out):
            return 0
    except ShellExit as leave:
        return leave.status
    check_command_exists(args[0], state.env)
    return 1


def _start_stage(
    args: list[str],
    state: ShellState,
    source: _Upstream,
    target: TextIO | None,
    pipe_out: bool,
    feeders: list[threading.Thread],
) -> tuple[int | subprocess.Popen, _Upstream]:
    args = [strip_quotes(arg) for arg in args]
    if args and not is_builtin(args[0]):
        path = find_executable(args[0], state.env)
        if os.access(path, os.X_OK):
            _flush(sys.stdout, target)
            try:
                proc = subprocess.Popen(
                    [path, *args[1:]],
                    env=state.env.as_dict(),
                    stdin=subprocess.PIPE if isinstance(source, bytes) else source,
                    stdout=subprocess.PIPE if pipe_out else target,
                )
            except OSError as error:
                sys.stderr.write(f"{path}: {error.strerror}\n")
                return 1, b""
            if isinstance(source, bytes):
                feeder = threading.Thread(target=_feed, args=(proc.stdin, source))
                feeder.start()
                feeders.append(feeder)
            return proc, (proc.stdout if pipe_out else b"")
    buffer = io.StringIO() if pipe_out else None
    status = _run_in_process(args, state, target or buffer or sys.stdout)
    return status, (buffer.getvalue().encode() if buffer is not None else b"")


def execute_pipeline(pipeline: Pipeline, state: ShellState) -> int:
    """Run the commands of a pipeline together; return the last one's status."""
    results: list[int | subprocess.Popen] = []
    feeders: list[threading.Thread] = []
    upstream: _Upstream = None
    saved_cwd = os.getcwd()
    last_index = len(pipeline.commands) - 1
    try:
        with ExitStack() as stack:
            for index, command in enumerate(pipeline.commands):
                try:
                    streams = stack.enter_context(_redirected(command, state))
                except ShellError as error:
                    _report(error)
                    if isinstance(upstream, io.IOBase):
                        upstream.close()
                    results.append(1)
                    upstream = b""
                    continue
                source = upstream
                if streams.stdin is not None:
                    source = streams.stdin
                elif streams.data is not None:
                    source = streams.data
                pipe_out = index < last_index and streams.stdout is None
                result, next_upstream = _start_stage(
                    command.args, state, source, streams.stdout, pipe_out, feeders
                )
                if isinstance(upstream, io.IOBase):
                    upstream.close()
                results.append(result)
                upstream = next_upstream
            status = 0
            for result in results:
                if isinstance(result, subprocess.Popen):
                    status = _finish(result.wait())
                else:
                    status = result
            for feeder in feeders:
                feeder.join()
            return status
    finally:
        if os.getcwd() != saved_cwd:
            os.chdir(saved_cwd)


def execute_commands(commands: list[Command], state: ShellState) -> int:
    """Run commands in order and return the status of the last."""
    status = 0
    for command in commands:
        if isinstance(command, Pipeline):
            status = execute_pipeline(command, state)
        else:
            status = execute_simple_command(command, state)
    return status