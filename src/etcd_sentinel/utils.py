"""Shared utility helpers for the sentinel check."""

from __future__ import annotations

import math
import time

GIB = 1024 ** 3

_SIZE_UNITS = (
    (1024 ** 3, "GB"),
    (1024 ** 2, "MB"),
    (1024, "KB"),
)


def unix_timestamp() -> str:
    """Return the current Unix time in whole seconds, as a string."""
    return str(int(time.time()))


def parse_threshold(value: str) -> float:
    """Parse a threshold given in GB; it must be strictly positive."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Threshold must not be empty.")
    parsed = float(stripped)
    if not math.isfinite(parsed) or parsed <= 0:
        raise ValueError("Threshold must be a positive number.")
    return parsed


def gb_to_bytes(gigabytes: float) -> int:
    """Convert GB to bytes, truncating any fractional byte."""
    return int(gigabytes * GIB)


def format_gb(gigabytes: float) -> str:
    """Render a threshold the way it was typed (``2`` not ``2.0``, ``1.23456789`` in full)."""
    if gigabytes.is_integer():
        return str(int(gigabytes))
    return repr(gigabytes)


def human_readable(size: int) -> str:
    """Render bytes with the largest base-1024 unit that keeps the value >= 1."""
    for divisor, unit in _SIZE_UNITS:
        if size >= divisor:
            return f"{size / divisor:.2f} {unit}"
    return f"{size} B"
