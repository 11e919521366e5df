"""Command-line entry point: fetch -> extract -> classify -> report."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from . import __version__
from .classifier import classify
from .config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CONTAINER,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_USER,
    CheckConfig,
    build_config,
    load_environment,
)
from .errors import DeliveryError, SentinelError, UsageError
from .metrics import Resolver, extract_metrics
from .models import CheckResult
from .remote import RemoteStatusFetcher
from .reporting import ConsoleReporter, SplunkSender

logger = logging.getLogger("etcd_sentinel")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="etcd-sentinel",
        description="Remote ETCD cluster DB size check with optional Splunk HEC output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s --target node1.example.net --env PROD \\\n"
            "    --splunk-url https://splunk.local/services/collector/event \\\n"
            "    --splunk-token abcd1234 --index cluster-logs\n\n"
            "  %(prog)s --target node1.example.net --env NOPROD --warn 2.5 --crit 3 --json\n"
        ),
    )
    chk = ap.add_argument_group("Check")
    chk.add_argument("--target", help="Manager node to query (required)")
    chk.add_argument("--env", dest="environment", help="PROD (default) or NOPROD")
    chk.add_argument("--warn", help="Warning threshold in GB")
    chk.add_argument("--crit", help="Critical threshold in GB")
    rem = ap.add_argument_group("Remote")
    rem.add_argument("--user", default=DEFAULT_USER, help="SSH login user (default: %(default)s)")
    rem.add_argument(
        "--container", default=DEFAULT_CONTAINER,
        help="Docker name filter for the etcd container (default: %(default)s)",
    )
    rem.add_argument(
        "--connect-timeout", type=int, default=DEFAULT_CONNECT_TIMEOUT,
        help="SSH connect timeout in seconds (default: %(default)s)",
    )
    hec = ap.add_argument_group("Splunk HEC")
    hec.add_argument("--splunk-url", help="HEC endpoint (env: SPLUNK_URL)")
    hec.add_argument("--splunk-token", help="HEC token (env: SPLUNK_TOKEN)")
    hec.add_argument("--index", help="HEC index (env: SPLUNK_INDEX)")
    hec.add_argument("--source", help="HEC source (env: SPLUNK_SOURCE)")
    hec.add_argument("--sourcetype", help="HEC sourcetype (env: SPLUNK_SOURCETYPE)")
    hec.add_argument(
        "--http-timeout", type=float, default=DEFAULT_HTTP_TIMEOUT,
        help="HEC request timeout in seconds (default: %(default)s)",
    )
    hec.add_argument("--no-splunk", action="store_true", help="Never send to HEC")
    out = ap.add_argument_group("Output")
    out.add_argument("--json", action="store_true", help="Print the result as JSON")
    out.add_argument("--debug", action="store_true", help="Debug logging")
    out.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def configure_logging(debug: bool = False) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[etcd_sentinel] %(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def config_from_args(args: argparse.Namespace) -> CheckConfig:
    return build_config(
        target=args.target,
        environment=args.environment,
        warn=args.warn,
        crit=args.crit,
        splunk_url=args.splunk_url,
        splunk_token=args.splunk_token,
        index=args.index,
        source=args.source,
        sourcetype=args.sourcetype,
        http_timeout=args.http_timeout,
        user=args.user,
        container=args.container,
        connect_timeout=args.connect_timeout,
        json_output=args.json,
        splunk_enabled=not args.no_splunk,
    )


def run(
    config: CheckConfig,
    *,
    fetcher: Optional[RemoteStatusFetcher] = None,
    resolver: Optional[Resolver] = None,
    sender: Optional[SplunkSender] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Run one check and return the process exit code."""
    reporter = ConsoleReporter(stream or sys.stdout, as_json=config.json_output)
    reporter.banner(config.target, config.environment)

    fetcher = fetcher or RemoteStatusFetcher(
        config.target,
        user=config.user,
        container=config.container,
        connect_timeout=config.connect_timeout,
    )
    try:
        raw = fetcher.fetch()
        metrics = extract_metrics(raw, resolver=resolver)
    except SentinelError as exc:
        logger.error("❌ %s", exc)
        return exc.exit_code

    verdict = classify(
        metrics.max_db_size, config.warn_bytes, config.crit_bytes, crit_gb=config.crit_gb
    )
    result = CheckResult(
        target=config.target,
        environment=config.environment,
        leader=metrics.leader_name,
        avg_db_size=metrics.avg_db_size,
        max_db_size=metrics.max_db_size,
        warn_bytes=config.warn_bytes,
        crit_bytes=config.crit_bytes,
        status=verdict.level,
        message=verdict.message,
        percent=verdict.percent,
        exit_code=verdict.exit_code,
    )
    reporter.report(result)

    if config.splunk.enabled:
        sender = sender or SplunkSender(config.splunk)
        try:
            sender.send(result)
        except DeliveryError as exc:
            logger.warning("⚠️ Failed to send data to Splunk: %s", exc)

    reporter.finish(result.exit_code)
    return result.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        configure_logging(args.debug)
        config = config_from_args(args)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return exc.exit_code
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
