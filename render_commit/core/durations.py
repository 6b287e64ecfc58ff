"""Parsing of Go-style duration strings such as ``30s`` or ``1m30s``."""

from __future__ import annotations

import re

DURATION_PATTERN = r"^(\d+(\.\d+)?(ns|us|µs|ms|s|m|h))+$"

_DURATION_RE = re.compile(DURATION_PATTERN)
_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def is_duration(value: str) -> bool:
    return _DURATION_RE.fullmatch(value) is not None


def parse_duration(value: str) -> float:
    """Convert a duration string to seconds.

    Args:
        value: Duration such as ``"30s"``, ``"250ms"`` or ``"1h2m3.5s"``

    Returns:
        Number of seconds represented by ``value``

    Raises:
        ValueError: If ``value`` is not a well-formed duration
    """
    if not is_duration(value):
        raise ValueError(f"Invalid duration: {value!r}")
    return sum(
        float(amount) * _UNIT_SECONDS[unit] for amount, unit in _PART_RE.findall(value)
    )
