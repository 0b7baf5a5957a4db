"""Tests for severity grouping and count reconciliation."""

import logging
from collections import Counter

from solana_auditor.aggregate import aggregate, group_by_severity
from solana_auditor.engine import create_analyzer, process_directory
from solana_auditor.models import (
    SEVERITY_ORDER,
    AnalysisResult,
    AnalysisStats,
    Finding,
    Location,
    Severity,
)


def _finding(severity: Severity, line: int, description: str = "") -> Finding:
    return Finding(
        severity=severity,
        description=description or f"{severity.value} at {line}",
        location=Location(file="programs/vault/src/lib.rs", line=line),
    )


def _result(findings: list[Finding], stats: dict | None = None) -> AnalysisResult:
    counts = stats if stats is not None else dict(Counter(f.severity for f in findings))
    return AnalysisResult(findings=findings, stats=AnalysisStats(findings_by_severity=counts))


class TestGroupBySeverity:
    def test_canonical_order_regardless_of_input(self):
        findings = [
            _finding(Severity.INFORMATIONAL, 1),
            _finding(Severity.LOW, 2),
            _finding(Severity.HIGH, 3),
            _finding(Severity.MEDIUM, 4),
        ]
        assert list(group_by_severity(findings)) == list(SEVERITY_ORDER)

    def test_stable_within_group(self):
        findings = [
            _finding(Severity.HIGH, 30),
            _finding(Severity.LOW, 1),
            _finding(Severity.HIGH, 10),
            _finding(Severity.HIGH, 20),
        ]
        groups = group_by_severity(findings)
        assert [f.location.line for f in groups[Severity.HIGH]] == [30, 10, 20]

    def test_empty_groups_dropped(self):
        groups = group_by_severity([_finding(Severity.LOW, 1)])
        assert list(groups) == [Severity.LOW]

    def test_no_findings(self):
        assert group_by_severity([]) == {}


class TestAggregate:
    def test_low_high_high_scenario(self):
        result = _result([
            _finding(Severity.LOW, 1),
            _finding(Severity.HIGH, 2),
            _finding(Severity.HIGH, 3),
        ])
        aggregated = aggregate(result)

        assert aggregated.total == 3
        assert aggregated.severities == [Severity.HIGH, Severity.LOW]
        assert aggregated.reported_counts == {Severity.HIGH: 2, Severity.LOW: 1}
        assert aggregated.derived_counts == {Severity.HIGH: 2, Severity.LOW: 1}
        assert aggregated.is_consistent

    def test_zero_findings_is_success(self):
        aggregated = aggregate(_result([]))
        assert aggregated.total == 0
        assert aggregated.groups == ()
        assert aggregated.is_consistent

    def test_mismatch_is_reported_not_fatal(self, caplog):
        result = _result([_finding(Severity.HIGH, 1)], stats={Severity.HIGH: 2, Severity.LOW: 1})
        with caplog.at_level(logging.WARNING):
            aggregated = aggregate(result)

        assert not aggregated.is_consistent
        assert aggregated.mismatches() == {Severity.HIGH: (2, 1), Severity.LOW: (1, 0)}
        assert len(caplog.records) == 2

    def test_engine_stats_match_partition(self, program_dir):
        result = create_analyzer().analyze_files(process_directory(program_dir))
        aggregated = aggregate(result)

        assert sum(result.stats.findings_by_severity.values()) == len(result.findings)
        assert aggregated.derived_counts == {k: v for k, v in result.stats.findings_by_severity.items() if v}
        assert aggregated.is_consistent

    def test_group_reported_count(self):
        aggregated = aggregate(_result([_finding(Severity.MEDIUM, 4)]))
        group = aggregated.groups[0]
        assert group.reported_count == group.count == 1
