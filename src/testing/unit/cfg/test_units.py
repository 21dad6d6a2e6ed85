import pytest

from shardbridge.cfg import parse_byte_size, parse_time_value
from shardbridge.errors import ConfigurationError


def test_time_values():
    assert parse_time_value("500ms") == 0.5
    assert parse_time_value("10s") == 10.0
    assert parse_time_value("1m") == 60.0
    assert parse_time_value("2h") == 7200.0
    assert parse_time_value("1d") == 86400.0


def test_bare_time_values_are_milliseconds():
    assert parse_time_value("1500") == 1.5
    assert parse_time_value("0") == 0.0


def test_byte_sizes():
    assert parse_byte_size("100b") == 100
    assert parse_byte_size("1kb") == 1024
    assert parse_byte_size("1mb") == 1024 * 1024
    assert parse_byte_size("1gb") == 1024**3
    assert parse_byte_size("2048") == 2048


def test_invalid_values():
    with pytest.raises(ConfigurationError, match="Unknown time unit"):
        parse_time_value("5weeks")
    with pytest.raises(ConfigurationError, match="Cannot parse byte size"):
        parse_byte_size("lots")
