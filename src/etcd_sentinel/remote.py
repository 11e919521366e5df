"""Remote etcd status retrieval over SSH."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from typing import Callable, List, Optional, Sequence

from .config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_CONTAINER, DEFAULT_USER
from .errors import FetchError

logger = logging.getLogger("etcd_sentinel.remote")

_CONTAINER_ID = re.compile(r"^[0-9a-f]{6,64}$")

Runner = Callable[..., subprocess.CompletedProcess]


def ssh_command(
    host: str,
    remote_argv: Sequence[str],
    *,
    user: str = DEFAULT_USER,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
) -> List[str]:
    """Build the local argv for running ``remote_argv`` on ``host``.

    ssh hands the remote part to a shell, so every word is quoted.
    """
    return [
        "ssh",
        "-o", "BatchMode=yes",
        "-o", "StrictHostKeyChecking=no",
        "-o", f"ConnectTimeout={connect_timeout}",
        f"{user}@{host}",
        "--",
        shlex.join(remote_argv),
    ]


def endpoint_status_argv(container_id: str) -> List[str]:
    return [
        "docker", "exec",
        "-e", "ETCDCTL_API=3",
        container_id,
        "etcdctl", "--cluster=true", "endpoint", "status", "-w", "json",
    ]


class RemoteStatusFetcher:
    """Reads ``etcdctl endpoint status`` from the etcd container on a manager node."""

    def __init__(
        self,
        host: str,
        *,
        user: str = DEFAULT_USER,
        container: str = DEFAULT_CONTAINER,
        connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
        command_timeout: Optional[float] = None,
        runner: Optional[Runner] = None,
    ) -> None:
        self._host = host
        self._user = user
        self._container = container
        self._connect_timeout = connect_timeout
        self._command_timeout = command_timeout
        self._run = runner or subprocess.run

    def fetch(self) -> str:
        """Return the raw JSON text printed by etcdctl."""
        container_id = self.find_container()
        output = self._remote(endpoint_status_argv(container_id))
        if not output.strip():
            raise FetchError(f"Empty response from {self._host}")
        return output

    def find_container(self) -> str:
        output = self._remote(["docker", "ps", "-q", "-f", f"name={self._container}"])
        ids = output.split()
        if not ids:
            raise FetchError(
                f"No running container matching '{self._container}' on {self._host}"
            )
        if len(ids) > 1:
            logger.debug("Several containers match %s, using %s", self._container, ids[0])
        container_id = ids[0]
        if not _CONTAINER_ID.match(container_id):
            raise FetchError(f"Unexpected container id from {self._host}: {container_id!r}")
        return container_id

    def _remote(self, remote_argv: Sequence[str]) -> str:
        argv = ssh_command(
            self._host,
            remote_argv,
            user=self._user,
            connect_timeout=self._connect_timeout,
        )
        logger.debug("Running: %s", shlex.join(argv))
        try:
            completed = self._run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._command_timeout,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as exc:
            raise FetchError("ssh client not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise FetchError(f"Timed out talking to {self._host}") from exc
        except OSError as exc:
            raise FetchError(f"Failed to start ssh: {exc}") from exc

        if completed.stderr:
            logger.debug("Remote stderr: %s", completed.stderr.strip())
        if completed.returncode != 0:
            raise FetchError(
                f"Failed to retrieve etcd status from {self._host} "
                f"(exit {completed.returncode})"
            )
        return completed.stdout
