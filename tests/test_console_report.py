"""Tests for Rich terminal rendering."""

import io
from collections import Counter

from rich.console import Console

from solana_auditor.aggregate import aggregate
from solana_auditor.catalog import list_rules
from solana_auditor.models import AnalysisResult, AnalysisStats, Finding, Location, Rule, Severity
from solana_auditor.reporting.console import (
    render_findings,
    render_rule_info,
    render_rule_list,
    render_summary,
)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, no_color=True, highlight=False, emoji=False)


def _text(console: Console) -> str:
    return console.file.getvalue()


def _finding(severity: Severity, line: int, description: str, **kwargs) -> Finding:
    return Finding(
        severity=severity,
        description=description,
        location=Location(file="src/lib.rs", line=line),
        **kwargs,
    )


def _aggregated(findings: list[Finding]):
    counts = dict(Counter(f.severity for f in findings))
    return aggregate(AnalysisResult(findings=findings, stats=AnalysisStats(findings_by_severity=counts)))


SCENARIO = [
    _finding(Severity.LOW, 5, "Panicking unwrap"),
    _finding(
        Severity.HIGH, 9, "Arbitrary CPI",
        code_snippet="invoke(&ix, &[acct])?;",
        recommendations=["Check program id", "Pin the callee"],
    ),
    _finding(Severity.HIGH, 14, "Unchecked AccountInfo"),
]


class TestRenderSummary:
    def test_counts(self):
        console = _console()
        render_summary(_aggregated(SCENARIO), console)
        out = _text(console)

        assert "ANALYSIS SUMMARY" in out
        assert "Total findings: 3" in out
        high_line = next(line for line in out.splitlines() if "High:" in line)
        low_line = next(line for line in out.splitlines() if "Low:" in line)
        assert high_line.rstrip().endswith("2")
        assert low_line.rstrip().endswith("1")
        assert out.index("High:") < out.index("Low:")
        assert "Medium:" not in out
        assert "Informational:" not in out

    def test_no_findings(self):
        console = _console()
        render_summary(_aggregated([]), console)
        assert "No vulnerabilities found!" in _text(console)
        assert "Total findings" not in _text(console)

    def test_idempotent(self):
        aggregated = _aggregated(SCENARIO)
        first, second = _console(), _console()
        render_summary(aggregated, first)
        render_summary(aggregated, second)
        assert _text(first) == _text(second)

    def test_summary_uses_engine_counts(self):
        findings = [_finding(Severity.MEDIUM, 1, "x")]
        aggregated = aggregate(AnalysisResult(
            findings=findings,
            stats=AnalysisStats(findings_by_severity={Severity.MEDIUM: 1, Severity.LOW: 0}),
        ))
        console = _console()
        render_summary(aggregated, console)
        assert "Medium:" in _text(console)
        assert "Low:" not in _text(console)


class TestRenderFindings:
    def test_numbering_spans_groups(self):
        console = _console()
        render_findings(_aggregated(SCENARIO), console)
        out = _text(console)

        assert "DETAILED FINDINGS" in out
        assert out.index("High Severity") < out.index("Low Severity")
        assert "1. Arbitrary CPI" in out
        assert "2. Unchecked AccountInfo" in out
        assert "3. Panicking unwrap" in out
        assert "src/lib.rs:9" in out

    def test_non_verbose_hides_snippet_and_recommendations(self):
        console = _console()
        render_findings(_aggregated(SCENARIO), console, verbose=False)
        out = _text(console)
        assert "Code:" not in out
        assert "Check program id" not in out

    def test_verbose_shows_snippet_and_joined_recommendations(self):
        console = _console()
        render_findings(_aggregated(SCENARIO), console, verbose=True)
        out = _text(console)
        assert "Code: invoke(&ix, &[acct])?;" in out
        assert "Check program id, Pin the callee" in out
        assert out.count("Code:") == 1

    def test_markup_in_description_is_literal(self):
        console = _console()
        render_findings(_aggregated([_finding(Severity.LOW, 1, "Missing #[account(mut)] on [bold]vault")]), console)
        assert "Missing #[account(mut)] on [bold]vault" in _text(console)

    def test_no_findings_renders_nothing(self):
        console = _console()
        render_findings(_aggregated([]), console)
        assert _text(console) == ""

    def test_does_not_mutate_result(self):
        aggregated = _aggregated(SCENARIO)
        before = [group.findings for group in aggregated.groups]
        render_findings(aggregated, _console(), verbose=True)
        assert [group.findings for group in aggregated.groups] == before


CATALOG = [
    Rule(id="SOL-009", title="Panicking unwrap", description="unwrap aborts", severity=Severity.LOW),
    Rule(id="SOL-001", title="Unchecked AccountInfo", description="raw account", severity=Severity.HIGH,
         recommendations=["Use Account<'info, T>"]),
]


class TestRenderRules:
    def test_rule_list(self):
        console = _console()
        render_rule_list(list_rules(CATALOG), console)
        out = _text(console)
        assert out.index("High Severity (1 rules)") < out.index("Low Severity (1 rules)")
        assert "SOL-001 - Unchecked AccountInfo" in out
        assert "Total: 2 rules" in out
        assert "raw account" not in out

    def test_rule_list_detailed(self):
        console = _console()
        render_rule_list(list_rules(CATALOG), console, detailed=True)
        assert "raw account" in _text(console)

    def test_empty_rule_list(self):
        console = _console()
        render_rule_list(list_rules(CATALOG, "medium"), console)
        assert "No rules found" in _text(console)

    def test_rule_info(self):
        console = _console()
        render_rule_info(CATALOG[1], console)
        out = _text(console)
        assert "ID: SOL-001" in out
        assert "Severity:" in out and "High" in out
        assert "raw account" in out
        assert "Use Account<'info, T>" in out
