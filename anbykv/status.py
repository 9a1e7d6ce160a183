"""Error types raised by storage operations."""

from __future__ import annotations

import enum


class Code(enum.IntEnum):
    """Numeric kind of a storage error."""

    OK = 0
    NOT_FOUND = 1
    CORRUPTION = 2
    NOT_SUPPORTED = 3
    INVALID_ARGUMENT = 4
    IO_ERROR = 5


_PREFIXES = {
    Code.OK: "OK",
    Code.NOT_FOUND: "NotFound: ",
    Code.CORRUPTION: "Corruption: ",
    Code.NOT_SUPPORTED: "Not implemented: ",
    Code.INVALID_ARGUMENT: "Invalid argument: ",
    Code.IO_ERROR: "IO error: ",
}


def _as_text(value: str | bytes) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="backslashreplace")
    return str(value)


class StatusError(Exception):
    """Base class for errors reported by the storage engine.

    The full message is ``message`` followed by ``": " + detail`` when a
    non-empty detail is given.
    """

    code: Code | None = None

    def __init__(self, message: str | bytes = "", detail: str | bytes = "") -> None:
        self.message = _as_text(message)
        self.detail = _as_text(detail)
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        """The message together with its detail, if any."""
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def __str__(self) -> str:
        code = self.code
        if code is None:
            return self.full_message
        return _PREFIXES[code] + self.full_message


class NotFoundError(StatusError):
    """The requested entry does not exist."""

    code = Code.NOT_FOUND


class CorruptionError(StatusError):
    """Stored data failed validation."""

    code = Code.CORRUPTION


class NotSupportedError(StatusError):
    """The requested operation is not implemented."""

    code = Code.NOT_SUPPORTED


class InvalidArgumentError(StatusError):
    """An argument was not acceptable."""

    code = Code.INVALID_ARGUMENT


class StorageIOError(StatusError):
    """An input/output operation failed."""

    code = Code.IO_ERROR