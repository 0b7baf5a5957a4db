"""Markdown document rendering for analysis findings."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from solana_auditor.aggregate import group_by_severity
from solana_auditor.errors import ReportError
from solana_auditor.models import SEVERITY_ORDER, Finding


class ReportGenerator:
    """Renders a findings list for one project and writes it to disk."""

    def __init__(self, findings: list[Finding], project: str):
        self.findings = list(findings)
        self.project = project

    def render_markdown(self, generated_at: datetime | None = None) -> str:
        generated_at = generated_at or datetime.now(timezone.utc)
        groups = group_by_severity(self.findings)

        lines = [
            "# Security Analysis Report",
            "",
            f"- **Project:** `{self.project}`",
            f"- **Generated:** {generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            f"- **Total findings:** {len(self.findings)}",
            "",
            "## Summary",
            "",
        ]

        if not self.findings:
            lines.extend(["No vulnerabilities found.", ""])
            return "\n".join(lines)

        lines.extend(["| Severity | Count |", "|---|---|"])
        for severity in SEVERITY_ORDER:
            lines.append(f"| {severity.label} | {len(groups.get(severity, []))} |")
        lines.extend(["", "## Findings", ""])

        index = 1
        for severity, items in groups.items():
            lines.extend([f"### {severity.label} Severity", ""])
            for finding in items:
                heading = f"{index}. {finding.description}"
                if finding.rule_id:
                    heading += f" (`{finding.rule_id}`)"
                lines.extend([f"#### {heading}", "", f"**Location:** `{finding.location}`", ""])
                if finding.code_snippet:
                    lines.extend(["```rust", finding.code_snippet, "```", ""])
                if finding.recommendations:
                    lines.append("**Recommendations:**")
                    lines.append("")
                    lines.extend(f"- {item}" for item in finding.recommendations)
                    lines.append("")
                index += 1

        return "\n".join(lines)

    def save_markdown_report(self, path: str | Path) -> None:
        """Write the Markdown report to ``path``.

        Raises:
            ReportError: the file cannot be written.
        """
        try:
            Path(path).write_text(self.render_markdown(), encoding="utf-8")
        except OSError as e:
            raise ReportError(str(e)) from e
