"""
Parsing of human-readable durations and byte sizes found in settings values.
"""

import re

from ..errors import ConfigurationError

_TIME_UNITS_MS = {
    "nanos": 1e-6,
    "micros": 1e-3,
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}

_BYTE_UNITS = {
    "b": 1,
    "kb": 1024,
    "k": 1024,
    "mb": 1024**2,
    "m": 1024**2,
    "gb": 1024**3,
    "g": 1024**3,
}

_VALUE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")


def parse_time_value(value: str) -> float:
    """
    Parses a duration such as `500ms`, `10s`, `1m`, `2h` or `1d`.

    Bare numbers are read as milliseconds.

    Returns:
        float: The duration in **seconds**.

    Raises:
        ConfigurationError: If the value cannot be parsed.
    """
    match = _VALUE_RE.match(str(value))
    if match is None:
        raise ConfigurationError(f"Cannot parse time value '{value}'")
    number, unit = float(match.group(1)), match.group(2).lower()
    if not unit:
        unit = "ms"
    if unit not in _TIME_UNITS_MS:
        raise ConfigurationError(f"Unknown time unit '{unit}' in '{value}'")
    return number * _TIME_UNITS_MS[unit] / 1000.0


def parse_byte_size(value: str) -> int:
    """
    Parses a byte size such as `100b`, `512kb`, `1mb` or `1gb`.

    Bare numbers are read as bytes.

    Raises:
        ConfigurationError: If the value cannot be parsed.
    """
    match = _VALUE_RE.match(str(value))
    if match is None:
        raise ConfigurationError(f"Cannot parse byte size '{value}'")
    number, unit = float(match.group(1)), match.group(2).lower()
    if not unit:
        unit = "b"
    if unit not in _BYTE_UNITS:
        raise ConfigurationError(f"Unknown byte unit '{unit}' in '{value}'")
    return int(number * _BYTE_UNITS[unit])


def parse_bool(value: str) -> bool:
    """Lenient boolean parsing: `true`, `yes`, `on` and `1` are true."""
    return str(value).strip().lower() in ("true", "yes", "on", "1")
