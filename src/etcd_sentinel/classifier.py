"""Threshold classification of the maximum etcd DB size."""

from __future__ import annotations

from typing import Optional

from .errors import EXIT_CRIT, EXIT_OK, EXIT_WARN
from .models import Classification, StatusLevel
from .utils import GIB, format_gb


def usage_percent(max_bytes: int, crit_bytes: int) -> int:
    """Percent of the critical threshold used, rounded down."""
    return (max_bytes * 100) // crit_bytes


def classify(
    max_bytes: int,
    warn_bytes: int,
    crit_bytes: int,
    *,
    crit_gb: Optional[float] = None,
) -> Classification:
    """Map the maximum DB size onto OK/WARNING/CRITICAL.

    Boundaries belong to the more severe level: ``max == crit`` is CRITICAL and
    ``max == warn`` is WARNING. ``crit_gb`` is the threshold as configured, used in
    the message; it defaults to ``crit_bytes`` in GB.
    """
    if warn_bytes <= 0 or crit_bytes <= 0:
        raise ValueError("Thresholds must be positive.")
    if crit_bytes < warn_bytes:
        raise ValueError("Critical threshold must not be below the warning threshold.")

    percent = usage_percent(max_bytes, crit_bytes)
    crit_label = format_gb(crit_bytes / GIB if crit_gb is None else crit_gb)

    if max_bytes >= crit_bytes:
        return Classification(
            level=StatusLevel.CRITICAL,
            message=f"CRITICAL: ETCD DB size exceeds {crit_label} GB ({percent}%)",
            percent=percent,
            exit_code=EXIT_CRIT,
        )
    if max_bytes >= warn_bytes:
        return Classification(
            level=StatusLevel.WARNING,
            message=f"WARNING: ETCD DB size approaching limit ({percent}% of {crit_label} GB)",
            percent=percent,
            exit_code=EXIT_WARN,
        )
    return Classification(
        level=StatusLevel.OK,
        message=f"OK: ETCD DB size within safe limits ({percent}% of {crit_label} GB)",
        percent=percent,
        exit_code=EXIT_OK,
    )
