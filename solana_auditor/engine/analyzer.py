"""Line-oriented rule engine over parsed Rust sources."""

from __future__ import annotations

import logging
from collections import Counter

from solana_auditor.config import settings
from solana_auditor.engine.rules import DetectionRule, build_rule_set
from solana_auditor.models import (
    AnalysisOptions,
    AnalysisResult,
    AnalysisStats,
    Finding,
    Location,
    ParsedFile,
    Rule,
)

logger = logging.getLogger(__name__)


def _is_comment(line: str) -> bool:
    stripped = line.lstrip()
    return stripped.startswith("//") or stripped.startswith("/*")


class Analyzer:
    """Applies the active rule set to parsed files."""

    def __init__(self, rules: list[DetectionRule], options: AnalysisOptions | None = None):
        self.options = options or AnalysisOptions()
        self._catalog = rules
        ignored_ids = {rule_id.casefold() for rule_id in self.options.ignore_rules}
        self._active = [
            detection for detection in rules
            if detection.rule.rule_type in self.options.include_rule_types
            and detection.rule.severity not in self.options.ignore_severities
            and detection.id.casefold() not in ignored_ids
        ]

    @property
    def rules(self) -> list[Rule]:
        """Every rule in the catalog, regardless of the run's filters."""
        return [detection.rule for detection in self._catalog]

    @property
    def active_rules(self) -> list[Rule]:
        return [detection.rule for detection in self._active]

    def analyze_files(self, parsed_files: list[ParsedFile]) -> AnalysisResult:
        findings: list[Finding] = []
        seen: set[tuple[str, int, str]] = set()

        for parsed in parsed_files:
            for line_no, line in enumerate(parsed.lines, start=1):
                if _is_comment(line):
                    continue
                for detection in self._active:
                    if not detection.pattern.search(line):
                        continue
                    key = (parsed.path, line_no, detection.id)
                    if key in seen:
                        continue
                    seen.add(key)
                    findings.append(self._make_finding(detection, parsed.path, line_no, line))

        counts = Counter(finding.severity for finding in findings)
        logger.debug(
            "Applied %d rule(s) to %d file(s): %d finding(s)",
            len(self._active), len(parsed_files), len(findings),
        )
        return AnalysisResult(
            findings=findings,
            stats=AnalysisStats(
                findings_by_severity=dict(counts),
                files_analyzed=len(parsed_files),
                rules_applied=len(self._active),
            ),
        )

    @staticmethod
    def _make_finding(detection: DetectionRule, path: str, line_no: int, line: str) -> Finding:
        rule = detection.rule
        return Finding(
            severity=rule.severity,
            description=f"{rule.title}: {rule.description}",
            location=Location(file=path, line=line_no),
            code_snippet=line.strip()[:settings.snippet_max_chars],
            recommendations=list(rule.recommendations),
            rule_id=rule.id,
            title=rule.title,
        )


def create_analyzer(options: AnalysisOptions | None = None) -> Analyzer:
    """Build an analyzer with built-in rules plus any custom templates.

    Raises:
        EngineError: the custom templates cannot be loaded.
    """
    options = options or AnalysisOptions()
    return Analyzer(build_rule_set(options.custom_templates_path), options)
