"""Running blocking commands, such as editors, in the program's terminal."""

from __future__ import annotations

import abc
import io
import subprocess
import sys
from dataclasses import dataclass
from typing import IO, Callable, Optional, Sequence, Tuple

ExecCallback = Callable[[Optional[BaseException]], object]


class ExecCommand(abc.ABC):
    """Something that runs in a blocking fashion in the current terminal."""

    @abc.abstractmethod
    def run(self) -> None:
        """Run to completion, raising on failure."""

    @abc.abstractmethod
    def set_stdin(self, stream: IO) -> None:
        """Use ``stream`` as standard input."""

    @abc.abstractmethod
    def set_stdout(self, stream: IO) -> None:
        """Use ``stream`` as standard output."""

    @abc.abstractmethod
    def set_stderr(self, stream: IO) -> None:
        """Use ``stream`` as standard error."""


def _fileno(stream: IO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _stdin_source(stream: Optional[IO]) -> Tuple[object, Optional[bytes]]:
    if stream is None:
        return subprocess.DEVNULL, None
    fd = _fileno(stream)
    if fd is not None:
        return fd, None
    data = stream.read()
    if isinstance(data, str):
        data = data.encode("utf-8")
    return subprocess.PIPE, data or b""


def _sink(stream: Optional[IO]) -> object:
    if stream is None:
        return subprocess.DEVNULL
    fd = _fileno(stream)
    if fd is not None:
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()
        return fd
    return subprocess.PIPE


def _deliver(stream: Optional[IO], data: Optional[bytes]) -> None:
    if stream is None or data is None:
        return
    if isinstance(stream, io.TextIOBase):
        stream.write(data.decode("utf-8", "replace"))
    else:
        stream.write(data)


class OsExecCommand(ExecCommand):
    """An operating-system process to run in the terminal.

    Streams left unset when it runs are connected to the null device.
    """

    def __init__(self, args: Sequence[str]) -> None:
        self.args = list(args)
        self.stdin: Optional[IO] = None
        self.stdout: Optional[IO] = None
        self.stderr: Optional[IO] = None

    def set_stdin(self, stream: IO) -> None:
        """Use ``stream`` as standard input unless one is already set."""
        if self.stdin is None:
            self.stdin = stream

    def set_stdout(self, stream: IO) -> None:
        """Use ``stream`` as standard output unless one is already set."""
        if self.stdout is None:
            self.stdout = stream

    def set_stderr(self, stream: IO) -> None:
        """Use ``stream`` as standard error unless one is already set."""
        if self.stderr is None:
            self.stderr = stream

    def run(self) -> None:
        """Run the process and wait for it.

        Raises OSError if it cannot start and CalledProcessError if it exits
        with a non-zero status.
        """
        stdin_arg, input_data = _stdin_source(self.stdin)
        stdout_arg = _sink(self.stdout)
        stderr_arg = _sink(self.stderr)
        with subprocess.Popen(
            self.args, stdin=stdin_arg, stdout=stdout_arg, stderr=stderr_arg
        ) as proc:
            out, err = proc.communicate(input_data)
        if stdout_arg == subprocess.PIPE:
            _deliver(self.stdout, out)
        if stderr_arg == subprocess.PIPE:
            _deliver(self.stderr, err)
        if proc.returncode != 0:
            raise subprocess.CalledProcessError(proc.returncode, self.args, out, err)


@dataclass(frozen=True)
class ExecMsg:
    """Asks the program to pause and run a command."""

    command: ExecCommand
    callback: Optional[ExecCallback] = None


def exec_command(
    command: ExecCommand, callback: Optional[ExecCallback]
) -> Callable[[], ExecMsg]:
    """Return a command that runs ``command`` while the program is paused.

    ``callback`` receives the error raised, or None, and returns the message
    to deliver afterwards.
    """
    msg = ExecMsg(command, callback)
    return lambda: msg


def exec_process(
    args: Sequence[str], callback: Optional[ExecCallback]
) -> Callable[[], ExecMsg]:
    """Return a command that runs the process ``args`` while the program is paused."""
    return exec_command(OsExecCommand(args), callback)


def run_exec(
    command: ExecCommand,
    callback: Optional[ExecCallback],
    stdin: Optional[IO],
    stdout: Optional[IO],
) -> object:
    """Run ``command`` on the given terminal streams and standard error.

    Returns what ``callback`` makes of the outcome, or None without one.
    """
    command.set_stdin(stdin)
    command.set_stdout(stdout)
    command.set_stderr(sys.stderr)
    error: Optional[BaseException] = None
    try:
        command.run()
    except Exception as exc:  # any failure is reported to the callback
        error = exc
    if callback is None:
        return None
    return callback(error)