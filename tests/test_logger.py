import io
import re
import threading

import pytest

from anbykv.logger import PosixLogger

_HEADER = r"\d{4}/\d{2}/\d{2}-\d{2}:\d{2}:\d{2}\.\d{6} (\S+) "


def _log_line(fmt, *args):
    stream = io.StringIO()
    logger = PosixLogger(stream)
    logger.log(fmt, *args)
    return stream.getvalue()


def test_line_has_header_and_message():
    text = _log_line("hello")
    match = re.fullmatch(_HEADER + r"hello\n", text)
    assert match is not None
    assert match.group(1) == str(threading.get_ident())[:32]


def test_arguments_are_formatted():
    text = _log_line("count=%d name=%s", 7, "abc")
    assert text.endswith("count=7 name=abc\n")


def test_existing_newline_is_not_doubled():
    text = _log_line("Current memtable full; waiting...\n")
    assert text.endswith("waiting...\n")
    assert text.count("\n") == 1


def test_percent_without_args_is_literal():
    text = _log_line("100% done")
    assert text.endswith("100% done\n")


def test_long_message_is_written_whole():
    message = "x" * 2000
    text = _log_line(message)
    assert message + "\n" in text


def test_each_call_writes_one_line():
    stream = io.StringIO()
    logger = PosixLogger(stream)
    logger.log("first")
    logger.log("second")
    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("first")
    assert lines[1].endswith("second")


def test_close_closes_stream():
    stream = io.StringIO()
    logger = PosixLogger(stream)
    logger.close()
    assert stream.closed


def test_context_manager_closes_stream():
    stream = io.StringIO()
    with PosixLogger(stream) as logger:
        logger.log("inside")
        assert stream.getvalue().endswith("inside\n")
    assert stream.closed


def test_logging_after_close_fails():
    stream = io.StringIO()
    logger = PosixLogger(stream)
    logger.close()
    with pytest.raises(ValueError):
        logger.log("late")


def test_none_stream_rejected():
    with pytest.raises(ValueError):
        PosixLogger(None)