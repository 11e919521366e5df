"""Environment variable/.env loading and check configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .errors import UsageError
from .utils import gb_to_bytes, parse_threshold

PROD = "PROD"
NOPROD = "NOPROD"

# (warn GB, crit GB)
DEFAULT_THRESHOLDS_GB = {
    NOPROD: (3.0, 4.0),
    PROD: (1.5, 2.0),
}

DEFAULT_INDEX = "cluster-logs"
DEFAULT_SOURCE = "etcd-sentinel"
DEFAULT_SOURCETYPE = "etcd-sentinel-json"
DEFAULT_USER = "root"
DEFAULT_CONTAINER = "ucp-kv"
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_HTTP_TIMEOUT = 10.0


def load_environment() -> None:
    """Load a .env file from the working directory, if there is one.

    Variables already present in the process environment are kept.
    """
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path, override=False)


@dataclass(frozen=True)
class SplunkConfig:
    url: str = ""
    token: str = ""
    index: str = DEFAULT_INDEX
    source: str = DEFAULT_SOURCE
    sourcetype: str = DEFAULT_SOURCETYPE
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.token)


@dataclass(frozen=True)
class CheckConfig:
    target: str
    environment: str
    warn_gb: float
    crit_gb: float
    warn_bytes: int
    crit_bytes: int
    splunk: SplunkConfig
    user: str = DEFAULT_USER
    container: str = DEFAULT_CONTAINER
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    json_output: bool = False


def normalize_environment(label: Optional[str]) -> str:
    """Return ``NOPROD`` for the non-production label, ``PROD`` for anything else."""
    if label and label.strip().upper() == NOPROD:
        return NOPROD
    return PROD


def resolve_thresholds(
    environment: str, warn: Optional[str], crit: Optional[str]
) -> Tuple[float, float]:
    """Return (warn GB, crit GB), using environment defaults unless both are given."""
    if not warn or not crit:
        return DEFAULT_THRESHOLDS_GB[environment]

    try:
        warn_gb = parse_threshold(warn)
        crit_gb = parse_threshold(crit)
    except ValueError as exc:
        raise UsageError(f"Invalid threshold: {exc}") from exc

    if crit_gb < warn_gb:
        raise UsageError(
            f"Critical threshold ({crit} GB) must not be below warning threshold ({warn} GB)"
        )
    return warn_gb, crit_gb


def threshold_bytes(warn_gb: float, crit_gb: float) -> Tuple[int, int]:
    """Convert (warn GB, crit GB) to bytes; both must come out as at least one byte."""
    try:
        warn_bytes = gb_to_bytes(warn_gb)
        crit_bytes = gb_to_bytes(crit_gb)
    except OverflowError as exc:
        raise UsageError("Threshold is too large") from exc

    if warn_bytes <= 0 or crit_bytes <= 0:
        raise UsageError("Threshold is smaller than one byte")
    if crit_bytes < warn_bytes:
        raise UsageError("Critical threshold must not be below warning threshold")
    return warn_bytes, crit_bytes


def build_config(
    *,
    target: Optional[str],
    environment: Optional[str] = None,
    warn: Optional[str] = None,
    crit: Optional[str] = None,
    splunk_url: Optional[str] = None,
    splunk_token: Optional[str] = None,
    index: Optional[str] = None,
    source: Optional[str] = None,
    sourcetype: Optional[str] = None,
    http_timeout: float = DEFAULT_HTTP_TIMEOUT,
    user: str = DEFAULT_USER,
    container: str = DEFAULT_CONTAINER,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    json_output: bool = False,
    splunk_enabled: bool = True,
    env: Optional[Mapping[str, str]] = None,
) -> CheckConfig:
    """Merge flags and environment variables into one immutable config.

    Flags win over ``SPLUNK_*`` variables, which win over built-in defaults.
    """
    env = os.environ if env is None else env

    target = (target or "").strip()
    if not target:
        raise UsageError("--target <remote_host> is required")
    if target.startswith("-"):
        raise UsageError(f"Invalid target host: {target!r}")

    label = normalize_environment(environment)
    warn_gb, crit_gb = resolve_thresholds(label, warn, crit)
    warn_bytes, crit_bytes = threshold_bytes(warn_gb, crit_gb)

    if connect_timeout <= 0:
        raise UsageError("--connect-timeout must be a positive number of seconds")
    if not http_timeout > 0:
        raise UsageError("--http-timeout must be a positive number of seconds")

    if splunk_enabled:
        url = splunk_url or env.get("SPLUNK_URL", "")
        token = splunk_token or env.get("SPLUNK_TOKEN", "")
    else:
        url = token = ""

    splunk = SplunkConfig(
        url=url,
        token=token,
        index=index or env.get("SPLUNK_INDEX") or DEFAULT_INDEX,
        source=source or env.get("SPLUNK_SOURCE") or DEFAULT_SOURCE,
        sourcetype=sourcetype or env.get("SPLUNK_SOURCETYPE") or DEFAULT_SOURCETYPE,
        timeout=http_timeout,
    )

    return CheckConfig(
        target=target,
        environment=label,
        warn_gb=warn_gb,
        crit_gb=crit_gb,
        warn_bytes=warn_bytes,
        crit_bytes=crit_bytes,
        splunk=splunk,
        user=user,
        container=container,
        connect_timeout=connect_timeout,
        json_output=json_output,
    )
