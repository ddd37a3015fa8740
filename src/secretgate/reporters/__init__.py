"""Scan result reporters for SecretGate."""

from secretgate.models import ScanResult
from secretgate.reporters.json_reporter import JSONReporter
from secretgate.reporters.text_reporter import TextReporter

REPORTERS = {
    "text": TextReporter,
    "json": JSONReporter,
}


def exit_code(result: ScanResult) -> int:
    """Exit status for the hook: non-zero aborts the commit."""
    return 1 if result.has_findings else 0


__all__ = ["JSONReporter", "TextReporter", "REPORTERS", "exit_code"]
