"""Sending log output to a file while the terminal is in use."""

from __future__ import annotations

import logging
import os
from typing import IO, Union


class _FileLogHandler(logging.StreamHandler):
    """The handler installed by this module; replaced on each call."""


class _LoggerOptions:
    """Gives a ``logging.Logger`` the set_output/set_prefix interface."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._handler: _FileLogHandler | None = None

    def set_output(self, stream: IO) -> None:
        for handler in list(self._logger.handlers):
            if isinstance(handler, _FileLogHandler):
                self._logger.removeHandler(handler)
        self._handler = _FileLogHandler(stream)
        self._logger.addHandler(self._handler)

    def set_prefix(self, prefix: str) -> None:
        if self._handler is not None:
            fmt = prefix.replace("%", "%%") + "%(message)s"
            self._handler.setFormatter(logging.Formatter(fmt))


def log_to_file(path: Union[str, os.PathLike], prefix: str) -> IO[str]:
    """Send the root logger's output to ``path``, creating it if needed.

    Returns the open file; close it when done.
    """
    return log_to_file_with(path, prefix, logging.getLogger())


def log_to_file_with(
    path: Union[str, os.PathLike], prefix: str, logger: object
) -> IO[str]:
    """Send ``logger``'s output to ``path`` and return the open file.

    ``logger`` is either a ``logging.Logger`` or any object with
    ``set_output(stream)`` and ``set_prefix(prefix)`` methods. A space is
    added after a prefix that does not already end in whitespace.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
    stream = os.fdopen(fd, "a", encoding="utf-8")

    target = _LoggerOptions(logger) if isinstance(logger, logging.Logger) else logger
    target.set_output(stream)

    if prefix and not prefix[-1].isspace():
        prefix += " "
    target.set_prefix(prefix)
    return stream