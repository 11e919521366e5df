"""Result reporters (console text/JSON and Splunk HEC)."""

from .console import ConsoleReporter
from .splunk import SplunkSender

__all__ = ["ConsoleReporter", "SplunkSender"]
