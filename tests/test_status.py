import pytest

from anbykv.status import (
    Code,
    CorruptionError,
    InvalidArgumentError,
    NotFoundError,
    NotSupportedError,
    StatusError,
    StorageIOError,
)


@pytest.mark.parametrize(
    "cls, code, prefix",
    [
        (NotFoundError, Code.NOT_FOUND, "NotFound: "),
        (CorruptionError, Code.CORRUPTION, "Corruption: "),
        (NotSupportedError, Code.NOT_SUPPORTED, "Not implemented: "),
        (InvalidArgumentError, Code.INVALID_ARGUMENT, "Invalid argument: "),
        (StorageIOError, Code.IO_ERROR, "IO error: "),
    ],
)
def test_prefix_and_code(cls, code, prefix):
    err = cls("some message")
    assert err.code is code
    assert str(err) == prefix + "some message"
    assert isinstance(err, StatusError)


def test_detail_is_joined_with_colon():
    err = CorruptionError("VersionEdit", "unknown tag")
    assert str(err) == "Corruption: VersionEdit: unknown tag"
    assert err.message == "VersionEdit"
    assert err.detail == "unknown tag"


def test_empty_detail_is_omitted():
    err = NotFoundError("missing", "")
    assert err.full_message == "missing"
    assert str(err) == "NotFound: missing"


def test_bytes_messages_are_decoded():
    err = InvalidArgumentError(b"changing comparator", b"while building table")
    assert err.full_message == "changing comparator: while building table"


def test_empty_not_found():
    err = NotFoundError()
    assert str(err) == "NotFound: "


def test_raise_and_catch_by_base():
    err = StorageIOError("disk", "full")
    assert err.code is Code.IO_ERROR
    assert str(err) == "IO error: disk: full"
    with pytest.raises(StatusError) as info:
        raise err
    assert info.value.full_message == "disk: full"


def test_base_error_has_no_prefix():
    err = StatusError("plain", "text")
    assert err.code is None
    assert str(err) == "plain: text"


def test_exception_args_carry_full_message():
    err = CorruptionError("bad", "block")
    assert err.args == ("bad: block",)