"""Summaries of container image vulnerability scans."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from typing import Any, Protocol

from rlarena import log


class _StatusNotifier(Protocol):
    def send_build_status(
        self, user_id: str, submission_id: str, status: str, message: str, image_url: str
    ) -> None: ...


@dataclass(frozen=True)
class ScanSummary:
    """Vulnerability counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def message(self) -> str:
        return (
            f"Security Scan Complete: {self.critical} CRITICAL, {self.high} HIGH, "
            f"{self.medium} MEDIUM, {self.low} LOW vulnerabilities found"
        )

    @property
    def status(self) -> str:
        return "scan_complete_critical" if self.critical > 0 else "scan_complete"


def _bad(detail: str) -> ValueError:
    return ValueError(f"failed to parse Trivy result: {detail}")


def summarize_scan(scan_result: str | bytes) -> ScanSummary:
    """Count the vulnerabilities in a JSON scan report; raise ``ValueError`` if malformed."""
    try:
        document: Any = json.loads(scan_result)
    except ValueError as exc:
        raise _bad(str(exc)) from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise _bad("report is not an object")

    results = document.get("Results") or []
    if not isinstance(results, list):
        raise _bad("Results is not a list")

    counts: Counter[str] = Counter()
    for result in results:
        if result is None:
            continue
        if not isinstance(result, dict):
            raise _bad("result is not an object")
        vulnerabilities = result.get("Vulnerabilities") or []
        if not isinstance(vulnerabilities, list):
            raise _bad("Vulnerabilities is not a list")
        for vulnerability in vulnerabilities:
            if vulnerability is None:
                counts[""] += 1
                continue
            if not isinstance(vulnerability, dict):
                raise _bad("vulnerability is not an object")
            severity = vulnerability.get("Severity") or ""
            if not isinstance(severity, str):
                raise _bad("Severity is not a string")
            counts[severity] += 1

    return ScanSummary(
        critical=counts["CRITICAL"],
        high=counts["HIGH"],
        medium=counts["MEDIUM"],
        low=counts["LOW"],
    )


class SecurityScanner:
    """Turns scan reports into notifications for the submission's owner."""

    def __init__(self, notifier: _StatusNotifier | None = None) -> None:
        self._notifier = notifier

    def process_scan_result(
        self, submission_id: str, agent_id: str, scan_result: str | bytes
    ) -> ScanSummary:
        summary = summarize_scan(scan_result)
        log.info(
            "Security scan completed",
            submissionId=submission_id,
            critical=summary.critical,
            high=summary.high,
            medium=summary.medium,
            low=summary.low,
        )
        if self._notifier is not None:
            self._notifier.send_build_status(
                agent_id, submission_id, summary.status, summary.message, ""
            )
        return summary