"""Domain models for the etcd sentinel check."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

LEADER_UNAVAILABLE = "N/A"


class StatusLevel(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class MemberStatus:
    """One etcd member as reported by ``etcdctl endpoint status``."""

    endpoint: str
    member_id: int
    leader_id: int
    db_size: int


@dataclass(frozen=True)
class ClusterMetrics:
    members: List[MemberStatus]
    avg_db_size: int
    max_db_size: int
    leader_endpoint: str
    leader_host: str
    leader_name: str = LEADER_UNAVAILABLE


@dataclass(frozen=True)
class Classification:
    level: StatusLevel
    message: str
    percent: int
    exit_code: int


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single check run, consumed by the reporters."""

    target: str
    environment: str
    leader: str
    avg_db_size: int
    max_db_size: int
    warn_bytes: int
    crit_bytes: int
    status: StatusLevel
    message: str
    percent: int
    exit_code: int
