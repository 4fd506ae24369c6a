"""Findings produced by the rule engine and the run-scoped failure catalog."""

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Closed taxonomy of LRA annotation findings."""
    MISSING_TERMINATION_CALLBACK = "MISSING_TERMINATION_CALLBACK"
    DUPLICATE_MARKER = "DUPLICATE_MARKER"
    CONFLICTING_MARKERS = "CONFLICTING_MARKERS"
    WRONG_PLAIN_SIGNATURE = "WRONG_PLAIN_SIGNATURE"
    MISSING_COMPLEMENTARY_ATTRIBUTE = "MISSING_COMPLEMENTARY_ATTRIBUTE"
    INCOMPLETE_ASYNC_HANDLING = "INCOMPLETE_ASYNC_HANDLING"


@dataclass(frozen=True)
class Finding:
    """A single structural problem found on a participant class."""
    code: ErrorCode
    message: str
    class_name: str = ""
    method_name: str = ""

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return self.class_name, self.code.value, self.method_name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "class": self.class_name,
            "method": self.method_name or None,
        }


class FailureCatalog:
    """Findings accumulated over one checking run.

    The catalog is created per run and handed to the engine. Appends are
    serialized so classes may be validated concurrently.
    """

    def __init__(self) -> None:
        self._findings: list[Finding] = []
        self._lock = threading.Lock()

    def add(self, finding: Finding) -> None:
        """Append a finding. Duplicates are kept."""
        with self._lock:
            self._findings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        findings = list(findings)
        with self._lock:
            self._findings.extend(findings)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._findings

    def __len__(self) -> int:
        with self._lock:
            return len(self._findings)

    @property
    def findings(self) -> tuple[Finding, ...]:
        """Snapshot of the findings in insertion order."""
        with self._lock:
            return tuple(self._findings)

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = no findings, 1 = findings present."""
        return 0 if self.is_empty() else 1

    def sorted_findings(self) -> list[Finding]:
        """Findings ordered by class name, error code and method name."""
        return sorted(self.findings, key=lambda f: f.sort_key)

    def counts_by_code(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for finding in self.findings:
            counts[finding.code.value] = counts.get(finding.code.value, 0) + 1
        return counts

    def format_report(self, sort: bool = False) -> str:
        """Render one line per finding, each prefixed by its error code."""
        findings = self.sorted_findings() if sort else self.findings
        return "\n".join(str(finding) for finding in findings)

    def to_dict(self, sort: bool = False) -> dict:
        """Convert to dictionary for JSON output."""
        findings = self.sorted_findings() if sort else self.findings
        return {
            "passed": not findings,
            "exit_code": 0 if not findings else 1,
            "total": len(findings),
            "counts": self.counts_by_code(),
            "findings": [finding.to_dict() for finding in findings],
        }
