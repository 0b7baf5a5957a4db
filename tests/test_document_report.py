"""Tests for the Markdown report generator and the document writer."""

from pathlib import Path

import pytest

from solana_auditor.errors import PersistenceError, ReportError
from solana_auditor.models import AnalysisResult, AnalysisStats, Finding, Location, Severity
from solana_auditor.reporting.document import normalize_report_path, save_report
from solana_auditor.reporting.markdown import ReportGenerator


def _result() -> AnalysisResult:
    findings = [
        Finding(
            severity=Severity.LOW,
            description="Panicking unwrap: unwrap() aborts the transaction",
            location=Location(file="src/lib.rs", line=18),
            code_snippet="let ix = build(&ctx).unwrap();",
            recommendations=["Propagate the error with ?"],
            rule_id="SOL-009",
        ),
        Finding(
            severity=Severity.HIGH,
            description="Arbitrary cross-program invocation",
            location=Location(file="src/lib.rs", line=19),
            rule_id="SOL-003",
        ),
    ]
    return AnalysisResult(
        findings=findings,
        stats=AnalysisStats(findings_by_severity={Severity.LOW: 1, Severity.HIGH: 1}),
    )


class TestNormalizeReportPath:
    def test_appends_extension(self):
        assert normalize_report_path("report") == Path("report.md")

    def test_keeps_md(self):
        assert normalize_report_path("out/report.md") == Path("out/report.md")

    def test_keeps_markdown(self):
        assert normalize_report_path("report.markdown") == Path("report.markdown")

    def test_replaces_other_extension(self):
        assert normalize_report_path("report.txt") == Path("report.md")

    def test_idempotent(self):
        once = normalize_report_path("audit")
        assert normalize_report_path(once) == once

    @pytest.mark.parametrize("path", [".", "..", "/", "out/.."])
    def test_nameless_path_is_persistence_error(self, path):
        with pytest.raises(PersistenceError, match="Invalid report path"):
            normalize_report_path(path)


class TestReportGenerator:
    def test_sections_in_severity_order(self):
        text = ReportGenerator(_result().findings, "/projects/vault").render_markdown()
        assert "`/projects/vault`" in text
        assert "**Total findings:** 2" in text
        assert text.index("### High Severity") < text.index("### Low Severity")
        assert "1. Arbitrary cross-program invocation (`SOL-003`)" in text
        assert "2. Panicking unwrap" in text
        assert "- Propagate the error with ?" in text
        assert "```rust" in text

    def test_summary_table(self):
        text = ReportGenerator(_result().findings, "p").render_markdown()
        assert "| High | 1 |" in text
        assert "| Medium | 0 |" in text

    def test_empty_findings_minimal_document(self):
        text = ReportGenerator([], "p").render_markdown()
        assert "No vulnerabilities found." in text
        assert "## Findings" not in text

    def test_write_failure_raises_report_error(self, tmp_path):
        with pytest.raises(ReportError):
            ReportGenerator([], "p").save_markdown_report(tmp_path / "missing" / "report.md")


class TestSaveReport:
    def test_writes_normalized_path(self, tmp_path):
        final = save_report(_result(), tmp_path / "report", tmp_path)
        assert final == tmp_path / "report.md"
        assert final.exists()
        assert "Arbitrary cross-program invocation" in final.read_text(encoding="utf-8")

    def test_passes_findings_and_project(self, tmp_path):
        calls = []

        class RecordingGenerator:
            def __init__(self, findings, project):
                calls.append((findings, project))

            def save_markdown_report(self, path):
                calls.append(path)

        result = _result()
        final = save_report(result, tmp_path / "r.md", Path("/projects/vault"), RecordingGenerator)
        assert calls[0] == (result.findings, str(Path("/projects/vault")))
        assert calls[1] == str(final)

    def test_failure_is_persistence_error(self, tmp_path):
        with pytest.raises(PersistenceError, match="Failed to save report"):
            save_report(_result(), tmp_path / "no" / "such" / "dir" / "report", tmp_path)

    def test_zero_findings_still_written(self, tmp_path):
        final = save_report(AnalysisResult(), tmp_path / "empty", tmp_path)
        assert "No vulnerabilities found." in final.read_text(encoding="utf-8")
