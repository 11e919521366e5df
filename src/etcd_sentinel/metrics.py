"""DB size aggregation and leader lookup from ``etcdctl endpoint status`` JSON."""

from __future__ import annotations

import json
import logging
import socket
from typing import Any, Callable, List, Optional
from urllib.parse import urlsplit

from .errors import ExtractionError
from .models import LEADER_UNAVAILABLE, ClusterMetrics, MemberStatus

logger = logging.getLogger("etcd_sentinel.metrics")

Resolver = Callable[[str], str]


def parse_members(raw: str) -> List[MemberStatus]:
    """Parse the endpoint status array into member records.

    Each element looks like::

        {"Endpoint": "https://10.0.0.5:2379",
         "Status": {"header": {"member_id": 123, ...},
                    "leader": 123, "dbSize": 4096, ...}}
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ExtractionError("Endpoint status is not valid JSON") from exc

    if not isinstance(data, list):
        raise ExtractionError("Endpoint status must be a JSON array")
    if not data:
        raise ExtractionError("Endpoint status contains no members")

    return [_member(index, item) for index, item in enumerate(data)]


def _member(index: int, item: Any) -> MemberStatus:
    try:
        status = item["Status"]
        endpoint = item["Endpoint"]
        member_id = status["header"]["member_id"]
        leader_id = status["leader"]
        db_size = status["dbSize"]
    except (KeyError, TypeError) as exc:
        raise ExtractionError(f"Member #{index} is missing field {exc}") from exc

    member_id = _as_int(index, "member_id", member_id)
    leader_id = _as_int(index, "leader", leader_id)
    db_size = _as_int(index, "dbSize", db_size)
    if db_size < 0:
        raise ExtractionError(f"Member #{index} has negative dbSize")
    if not isinstance(endpoint, str):
        raise ExtractionError(f"Member #{index} has non-string Endpoint")

    return MemberStatus(
        endpoint=endpoint,
        member_id=member_id,
        leader_id=leader_id,
        db_size=db_size,
    )


def _as_int(index: int, name: str, value: Any) -> int:
    # integral floats such as 1e9 are accepted
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ExtractionError(f"Member #{index} has non-integer {name}: {value!r}")
    return value


def endpoint_host(endpoint: str) -> str:
    """Strip scheme and port: ``https://10.0.0.5:2379`` -> ``10.0.0.5``."""
    if not endpoint:
        return ""
    if "://" not in endpoint:
        endpoint = f"//{endpoint}"
    try:
        host = urlsplit(endpoint).hostname
    except ValueError:
        return ""
    return host or ""


def reverse_lookup(host: str) -> str:
    """Return the DNS name for ``host``; raises ``OSError`` if it has none."""
    return socket.gethostbyaddr(host)[0]


def find_leader(members: List[MemberStatus]) -> Optional[MemberStatus]:
    """Find the member whose id equals the leader id reported by the first member."""
    leader_id = members[0].leader_id
    for member in members:
        if member.member_id == leader_id:
            return member
    return None


def extract_metrics(raw: str, resolver: Optional[Resolver] = None) -> ClusterMetrics:
    """Compute average/maximum DB size and resolve the leader's hostname.

    An unknown or unresolvable leader is reported as ``N/A``.
    """
    members = parse_members(raw)
    sizes = [member.db_size for member in members]
    avg_size = sum(sizes) // len(sizes)
    max_size = max(sizes)

    leader = find_leader(members)
    leader_endpoint = leader.endpoint if leader else ""
    leader_host = endpoint_host(leader_endpoint)
    if leader is None:
        logger.warning("Leader %s not found among members", members[0].leader_id)

    leader_name = LEADER_UNAVAILABLE
    if leader_host:
        lookup = resolver or reverse_lookup
        try:
            leader_name = lookup(leader_host) or LEADER_UNAVAILABLE
        except (OSError, UnicodeError) as exc:
            logger.debug("Reverse lookup for %s failed: %s", leader_host, exc)

    return ClusterMetrics(
        members=members,
        avg_db_size=avg_size,
        max_db_size=max_size,
        leader_endpoint=leader_endpoint,
        leader_host=leader_host,
        leader_name=leader_name,
    )
