import json
import logging
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from etcd_sentinel.config import build_config


def member(endpoint, member_id, leader_id, db_size):
    return {
        "Endpoint": endpoint,
        "Status": {
            "header": {"cluster_id": 17237436991929493444, "member_id": member_id, "revision": 42},
            "version": "3.5.9",
            "dbSize": db_size,
            "leader": leader_id,
            "raftTerm": 3,
        },
    }


@pytest.fixture
def status_json():
    members = [
        member("https://10.0.0.4:2379", 101, 202, 1_000_000_000),
        member("https://10.0.0.5:2379", 202, 202, 3_000_000_000),
    ]
    return json.dumps(members)


@pytest.fixture(autouse=True)
def clean_splunk_env(monkeypatch):
    for name in ("SPLUNK_URL", "SPLUNK_TOKEN", "SPLUNK_INDEX", "SPLUNK_SOURCE", "SPLUNK_SOURCETYPE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def prod_config():
    return build_config(target="manager1.example.net", environment="PROD", env={})


@pytest.fixture(autouse=True)
def reset_cli_logging():
    yield
    logger = logging.getLogger("etcd_sentinel")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
