"""Text and JSON rendering of a check result."""

from __future__ import annotations

import json
from typing import Any, Dict, TextIO

from ..models import CheckResult
from ..utils import human_readable

RULE = "-" * 59


def render_text(result: CheckResult) -> str:
    lines = [
        RULE,
        f"{'Leader:':<15}{result.leader}",
        f"{'Avg DB size:':<15}{human_readable(result.avg_db_size)}",
        f"{'Max DB size:':<15}{human_readable(result.max_db_size)} ({result.percent}%)",
        f"{'Status:':<15}{result.status.value}",
        f"{'Message:':<15}{result.message}",
        RULE,
    ]
    return "\n".join(lines)


def result_document(result: CheckResult) -> Dict[str, Any]:
    return {
        "target": result.target,
        "environment": result.environment,
        "leader": result.leader,
        "avg_db_size_bytes": result.avg_db_size,
        "avg_db_size": human_readable(result.avg_db_size),
        "max_db_size_bytes": result.max_db_size,
        "max_db_size": human_readable(result.max_db_size),
        "warn_bytes": result.warn_bytes,
        "crit_bytes": result.crit_bytes,
        "status": result.status.value,
        "message": result.message,
        "usage_percent": result.percent,
        "exit_code": result.exit_code,
    }


class ConsoleReporter:
    def __init__(self, stream: TextIO, *, as_json: bool = False) -> None:
        self._stream = stream
        self._as_json = as_json

    def banner(self, target: str, environment: str) -> None:
        if not self._as_json:
            print(f"===> Checking ETCD status @ {target} ({environment})", file=self._stream)

    def report(self, result: CheckResult) -> None:
        if self._as_json:
            print(json.dumps(result_document(result), ensure_ascii=False), file=self._stream)
        else:
            print(render_text(result), file=self._stream)

    def finish(self, exit_code: int) -> None:
        if not self._as_json:
            print(f"ETCD sentinel check completed (exit code: {exit_code})", file=self._stream)
