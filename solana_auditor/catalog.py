"""Read-only queries over the rule catalog."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from solana_auditor.errors import UnknownSeverityError
from solana_auditor.models import SEVERITY_ORDER, Rule, Severity, parse_severity


@dataclass(frozen=True)
class RuleGroup:
    severity: Severity
    rules: tuple[Rule, ...]

    @property
    def count(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class CatalogView:
    """Severity-grouped rules, groups in canonical order, empty groups dropped."""
    groups: tuple[RuleGroup, ...]
    severity_filter: Severity | None = None

    @property
    def total(self) -> int:
        return sum(group.count for group in self.groups)

    @property
    def severities(self) -> list[Severity]:
        return [group.severity for group in self.groups]


def list_rules(catalog: Iterable[Rule], severity_filter: str | None = None) -> CatalogView:
    """Group the catalog by severity, optionally restricted to one severity.

    Raises:
        UnknownSeverityError: ``severity_filter`` is not a known severity.
    """
    target: Severity | None = None
    if severity_filter is not None:
        target = parse_severity(severity_filter)
        if target is None:
            raise UnknownSeverityError(f"Unknown severity: {severity_filter}")

    rules = [rule for rule in catalog if target is None or rule.severity == target]

    groups = []
    for severity in SEVERITY_ORDER:
        members = tuple(rule for rule in rules if rule.severity == severity)
        if members:
            groups.append(RuleGroup(severity=severity, rules=members))

    return CatalogView(groups=tuple(groups), severity_filter=target)


def find_rule(catalog: Iterable[Rule], rule_id: str) -> Rule | None:
    """Exact, case-insensitive id lookup."""
    wanted = rule_id.strip().casefold()
    for rule in catalog:
        if rule.id.casefold() == wanted:
            return rule
    return None
