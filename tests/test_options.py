import pytest

from anbykv.memtable import bytewise_compare
from anbykv.options import (
    CompressionType,
    Options,
    ReadOptions,
    WriteOptions,
    sanitize_options,
)


@pytest.mark.parametrize(
    "kind, wire",
    [
        (CompressionType.NONE, 0),
        (CompressionType.SNAPPY, 1),
        (CompressionType.ZSTD, 2),
    ],
)
def test_compression_type_wire_values(kind, wire):
    result = sanitize_options(Options(compression=kind))
    assert result.compression is kind
    assert int(result.compression) == wire


def test_options_defaults():
    options = Options()
    assert options.comparator is bytewise_compare
    assert options.create_if_missing is False
    assert options.error_if_exists is False
    assert options.write_buffer_size == 4 * 1024 * 1024
    assert options.max_open_files == 1000
    assert options.block_size == 4 * 1024
    assert options.block_restart_interval == 16
    assert options.max_file_size == 2 * 1024 * 1024
    assert options.compression is CompressionType.SNAPPY
    assert options.zstd_compression_level == 1
    assert options.filter_policy is None


def test_read_and_write_option_defaults():
    read = ReadOptions()
    assert read.verify_checksums is False
    assert read.fill_cache is True
    assert read.snapshot is None
    assert WriteOptions().sync is False


def test_sanitize_keeps_values_in_range():
    options = Options()
    result = sanitize_options(options)
    assert result == options
    assert result is not options


@pytest.mark.parametrize(
    "field, low",
    [
        ("max_open_files", 64 + 10),
        ("write_buffer_size", 64 << 10),
        ("max_file_size", 1 << 20),
        ("block_size", 1 << 10),
    ],
)
def test_sanitize_raises_small_values_to_minimum(field, low):
    options = Options(**{field: 1})
    assert getattr(sanitize_options(options), field) == low


@pytest.mark.parametrize(
    "field, high",
    [
        ("max_open_files", 50000),
        ("write_buffer_size", 1 << 30),
        ("max_file_size", 1 << 30),
        ("block_size", 4 << 20),
    ],
)
def test_sanitize_lowers_large_values_to_maximum(field, high):
    options = Options(**{field: 1 << 40})
    assert getattr(sanitize_options(options), field) == high


def test_sanitize_does_not_modify_input():
    options = Options(block_size=1, paranoid_checks=True)
    result = sanitize_options(options)
    assert options.block_size == 1
    assert result.paranoid_checks is True
    assert result.comparator is options.comparator