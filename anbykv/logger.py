"""Writes timestamped information lines to a text stream."""

from __future__ import annotations

import datetime
import threading
from types import TracebackType
from typing import Any, Optional, TextIO, Type

_MAX_THREAD_ID_SIZE = 32


class PosixLogger:
    """Logger that prefixes each message with local time and thread id.

    The logger owns the stream and closes it in ``close``.
    """

    def __init__(self, stream: TextIO) -> None:
        if stream is None:
            raise ValueError("stream must not be None")
        self._stream = stream

    def log(self, fmt: str, *args: Any) -> None:
        """Write one line: ``YYYY/MM/DD-HH:MM:SS.uuuuuu <thread> <message>``."""
        now = datetime.datetime.now()
        thread_id = str(threading.get_ident())[:_MAX_THREAD_ID_SIZE]
        header = (
            f"{now.year:04d}/{now.month:02d}/{now.day:02d}-"
            f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}."
            f"{now.microsecond:06d} {thread_id} "
        )
        message = fmt % args if args else fmt
        line = header + message
        if not line.endswith("\n"):
            line += "\n"
        self._stream.write(line)
        self._stream.flush()

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()

    def __enter__(self) -> "PosixLogger":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()