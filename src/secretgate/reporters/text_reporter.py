"""Human-readable scan reporter for SecretGate."""

from __future__ import annotations

from secretgate.models import ScanResult


class TextReporter:
    """Render findings grouped by file, one line per finding."""

    def render(self, result: ScanResult) -> str:
        if not result.has_findings:
            return ""

        grouped = result.findings_by_file()
        lines = [
            f"Potential secrets found in {len(grouped)} staged file(s):",
            "",
        ]
        for file_path, findings in grouped.items():
            lines.append(file_path)
            for finding in findings:
                lines.append(
                    f"  {finding.location:<9} [{finding.rule_id}] {finding.description}: "
                    f"{finding.evidence}"
                )
            lines.append("")

        lines.append(
            "Remove the secrets (or mark a false positive with "
            "'secretgate: allow') and stage the files again."
        )
        return "\n".join(lines)
