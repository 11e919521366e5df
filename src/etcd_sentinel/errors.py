"""Shared exception types for the etcd sentinel check."""

from __future__ import annotations

EXIT_OK, EXIT_WARN, EXIT_CRIT = 0, 1, 2


class SentinelError(RuntimeError):
    """Base class for failures that end a check run."""

    exit_code: int = EXIT_CRIT


class UsageError(SentinelError):
    """Raised when command-line arguments are missing or invalid."""

    exit_code = EXIT_WARN


class FetchError(SentinelError):
    """Raised when the remote etcd status could not be retrieved."""

    exit_code = EXIT_CRIT


class ExtractionError(SentinelError):
    """Raised when the endpoint status payload is empty or malformed."""

    exit_code = EXIT_CRIT


class DeliveryError(SentinelError):
    """Raised when an event could not be delivered to the collector."""
