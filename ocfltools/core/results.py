"""Shared report sink for structural and checksum validation.

Findings accumulate across every check; nothing here ever stops a run.
Each finding is also logged so long validations can be followed live.
"""

from __future__ import annotations

import logging
from typing import Any

from ocfltools.models.reports import Finding, Severity

logger = logging.getLogger(__name__)


class ValidationResults:
    """Collects error, warning and ok findings."""

    def __init__(self) -> None:
        self._findings: list[Finding] = []

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def error(self, code: str, check: str, message: str, *, path: str = "") -> Finding:
        logger.error("[%s] %s: %s", code, check, message)
        return self._record(Severity.ERROR, check, message, code, path)

    def warning(self, code: str, check: str, message: str, *, path: str = "") -> Finding:
        logger.warning("[%s] %s: %s", code, check, message)
        return self._record(Severity.WARNING, check, message, code, path)

    def ok(self, check: str, message: str) -> Finding:
        logger.info("%s: %s", check, message)
        return self._record(Severity.OK, check, message, "", "")

    def _record(
        self, severity: Severity, check: str, message: str, code: str, path: str
    ) -> Finding:
        finding = Finding(
            severity=severity, check=check, message=message, code=code, path=path
        )
        self._findings.append(finding)
        return finding

    def merge(self, other: ValidationResults) -> None:
        """Append another collector's findings (without re-logging them)."""
        self._findings.extend(other.findings)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def findings(self) -> list[Finding]:
        return list(self._findings)

    def by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self._findings if f.severity == severity]

    def _grouped(self, severity: Severity) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for finding in self.by_severity(severity):
            grouped.setdefault(finding.check, []).append(finding.message)
        return grouped

    @property
    def errors(self) -> dict[str, list[str]]:
        """check -> error messages."""
        return self._grouped(Severity.ERROR)

    @property
    def warnings(self) -> dict[str, list[str]]:
        """check -> warning messages."""
        return self._grouped(Severity.WARNING)

    @property
    def passes(self) -> dict[str, list[str]]:
        """check -> ok messages."""
        return self._grouped(Severity.OK)

    @property
    def error_count(self) -> int:
        return len(self.by_severity(Severity.ERROR))

    @property
    def warning_count(self) -> int:
        return len(self.by_severity(Severity.WARNING))

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "pass": self.passes,
            "findings": [f.model_dump(mode="json") for f in self._findings],
        }
