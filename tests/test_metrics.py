import json
import socket

import pytest

from conftest import member
from etcd_sentinel.errors import ExtractionError
from etcd_sentinel.metrics import endpoint_host, extract_metrics, find_leader, parse_members
from etcd_sentinel.models import LEADER_UNAVAILABLE


def test_average_and_max(status_json):
    metrics = extract_metrics(status_json, resolver=lambda host: "etcd-2.example.net")
    assert metrics.avg_db_size == 2_000_000_000
    assert metrics.max_db_size == 3_000_000_000
    assert len(metrics.members) == 2


def test_leader_is_resolved_from_first_record(status_json):
    seen = []

    def resolver(host):
        seen.append(host)
        return "etcd-2.example.net"

    metrics = extract_metrics(status_json, resolver=resolver)
    assert seen == ["10.0.0.5"]
    assert metrics.leader_endpoint == "https://10.0.0.5:2379"
    assert metrics.leader_host == "10.0.0.5"
    assert metrics.leader_name == "etcd-2.example.net"


def test_unresolvable_leader_is_not_fatal(status_json):
    def resolver(host):
        raise socket.herror(1, "Unknown host")

    metrics = extract_metrics(status_json, resolver=resolver)
    assert metrics.leader_name == LEADER_UNAVAILABLE
    assert metrics.max_db_size == 3_000_000_000


def test_missing_leader_member_reports_na():
    raw = json.dumps([member("https://10.0.0.4:2379", 1, 99, 10)])
    metrics = extract_metrics(raw, resolver=lambda host: pytest.fail("should not resolve"))
    assert metrics.leader_name == LEADER_UNAVAILABLE
    assert metrics.leader_host == ""


def test_find_leader_uses_first_records_leader_id():
    members = parse_members(
        json.dumps(
            [
                member("https://a:2379", 1, 3, 10),
                member("https://b:2379", 2, 1, 10),
                member("https://c:2379", 3, 3, 10),
            ]
        )
    )
    assert find_leader(members).endpoint == "https://c:2379"


@pytest.mark.parametrize(
    "endpoint, host",
    [
        ("https://10.0.0.5:2379", "10.0.0.5"),
        ("http://etcd-1.internal:2379", "etcd-1.internal"),
        ("https://[fd00::5]:2379", "fd00::5"),
        ("10.0.0.7:2379", "10.0.0.7"),
        ("", ""),
    ],
)
def test_endpoint_host(endpoint, host):
    assert endpoint_host(endpoint) == host


def test_integral_float_sizes_are_accepted():
    raw = json.dumps([member("https://a:2379", 1, 1, 1e9), member("https://b:2379", 2, 1, 3e9)])
    metrics = extract_metrics(raw, resolver=lambda host: "a")
    assert metrics.avg_db_size == 2_000_000_000
    assert metrics.max_db_size == 3_000_000_000


@pytest.mark.parametrize(
    "raw",
    [
        "[]",
        "not json",
        "{}",
        json.dumps([{"Endpoint": "https://a:2379"}]),
        json.dumps([{"Status": {"dbSize": 1, "leader": 1, "header": {"member_id": 1}}}]),
        json.dumps([member("https://a:2379", 1, 1, "big")]),
        json.dumps([member("https://a:2379", 1, 1, -5)]),
        json.dumps([None]),
    ],
)
def test_malformed_payloads_raise(raw):
    with pytest.raises(ExtractionError):
        extract_metrics(raw, resolver=lambda host: "x")
