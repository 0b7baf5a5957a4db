"""Group engine findings by severity and reconcile counts with engine stats."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from solana_auditor.models import SEVERITY_ORDER, AnalysisResult, Finding, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeverityGroup:
    severity: Severity
    findings: tuple[Finding, ...]
    reported_count: int

    @property
    def count(self) -> int:
        return len(self.findings)


@dataclass(frozen=True)
class AggregatedFindings:
    """Findings partitioned by severity plus the engine's own counts."""
    groups: tuple[SeverityGroup, ...]
    total: int
    reported_counts: dict[Severity, int]

    @property
    def derived_counts(self) -> dict[Severity, int]:
        return {group.severity: group.count for group in self.groups}

    @property
    def severities(self) -> list[Severity]:
        return [group.severity for group in self.groups]

    def mismatches(self) -> dict[Severity, tuple[int, int]]:
        """Severities whose reported count differs from the partition size.

        Values are ``(reported, derived)`` pairs.
        """
        derived = self.derived_counts
        result: dict[Severity, tuple[int, int]] = {}
        for severity in SEVERITY_ORDER:
            reported = self.reported_counts.get(severity, 0)
            counted = derived.get(severity, 0)
            if reported != counted:
                result[severity] = (reported, counted)
        return result

    @property
    def is_consistent(self) -> bool:
        return not self.mismatches()


def group_by_severity(findings: Iterable[Finding]) -> dict[Severity, list[Finding]]:
    """Stable partition of findings by severity, keyed in canonical order."""
    buckets: dict[Severity, list[Finding]] = {severity: [] for severity in SEVERITY_ORDER}
    for finding in findings:
        buckets[finding.severity].append(finding)
    return {severity: items for severity, items in buckets.items() if items}


def aggregate(result: AnalysisResult) -> AggregatedFindings:
    reported = dict(result.stats.findings_by_severity)
    buckets = group_by_severity(result.findings)

    groups = tuple(
        SeverityGroup(
            severity=severity,
            findings=tuple(items),
            reported_count=reported.get(severity, 0),
        )
        for severity, items in buckets.items()
    )
    aggregated = AggregatedFindings(
        groups=groups,
        total=len(result.findings),
        reported_counts=reported,
    )

    for severity, (engine_count, counted) in aggregated.mismatches().items():
        logger.warning(
            "Engine reported %d %s finding(s) but returned %d",
            engine_count, severity.value, counted,
        )

    return aggregated
