"""Splunk HTTP Event Collector integration."""

from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Dict, Optional

import requests

from ..config import SplunkConfig
from ..errors import DeliveryError
from ..models import CheckResult
from ..utils import unix_timestamp

logger = logging.getLogger("etcd_sentinel.splunk")

SERVICE_NAME = "etcd_sentinel"


def build_event(
    result: CheckResult,
    settings: SplunkConfig,
    *,
    hostname: Optional[str] = None,
    clock: Callable[[], str] = unix_timestamp,
) -> Dict[str, Any]:
    """Build the HEC envelope for a check result."""
    return {
        "event": {
            "time": clock(),
            "host": hostname or socket.gethostname(),
            "environment": result.environment,
            "manager": result.target,
            "service": SERVICE_NAME,
            "status": result.status.value,
            "message": result.message,
            "leader": result.leader,
            "avg_db_size_bytes": result.avg_db_size,
            "max_db_size_bytes": result.max_db_size,
            "usage_percent": result.percent,
            "exit_code": result.exit_code,
        },
        "index": settings.index,
        "source": settings.source,
        "sourcetype": settings.sourcetype,
    }


class SplunkSender:
    def __init__(
        self, settings: SplunkConfig, session: Optional[requests.Session] = None
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def send(self, result: CheckResult) -> None:
        """POST the result to the collector; raises DeliveryError on any failure."""
        payload = build_event(result, self._settings)
        headers = {
            "Authorization": f"Splunk {self._settings.token}",
            "Content-Type": "application/json",
        }
        try:
            response = self._session.post(
                self._settings.url,
                headers=headers,
                json=payload,
                timeout=self._settings.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DeliveryError(f"Splunk HEC request failed: {exc}") from exc
        logger.debug("Event delivered to %s (HTTP %s)", self._settings.url, response.status_code)
