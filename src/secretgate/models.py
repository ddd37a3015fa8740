"""Data models for SecretGate."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Finding:
    """A single suspected secret inside a staged file."""

    file: str
    rule_id: str
    description: str
    line: int = 0
    column: int = 0
    evidence: str = ""

    @property
    def location(self) -> str:
        """``line:column``, or ``-`` for findings on the path itself."""
        if self.line <= 0:
            return "-"
        return f"{self.line}:{self.column}"

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "rule_id": self.rule_id,
            "description": self.description,
            "line": self.line,
            "column": self.column,
            "evidence": self.evidence,
        }


@dataclass
class ScanError:
    """A staged file that was skipped during scanning."""

    file: str
    reason: str

    def to_dict(self) -> dict:
        return {"file": self.file, "reason": self.reason}


@dataclass
class ScanResult:
    """Everything one scan produced."""

    findings: list[Finding] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)
    scanned: list[str] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def findings_by_file(self) -> dict[str, list[Finding]]:
        """Group findings by file, keeping the order files were scanned in."""
        grouped: dict[str, list[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.file, []).append(finding)
        return grouped

    def to_dict(self) -> dict:
        return {
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
            "scanned": list(self.scanned),
            "summary": {
                "files_scanned": len(self.scanned),
                "files_with_findings": len(self.findings_by_file()),
                "findings": len(self.findings),
                "skipped": len(self.errors),
            },
        }
