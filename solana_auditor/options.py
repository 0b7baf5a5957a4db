"""Option resolution: command flags and config documents to RunParameters."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from solana_auditor.config_file import AuditConfig
from solana_auditor.models import (
    ALL_RULE_TYPES,
    AnalysisOptions,
    RuleType,
    RunParameters,
    Severity,
    parse_rule_type,
    parse_severity,
)

logger = logging.getLogger(__name__)


def _split_tokens(raw: str | Iterable[str] | None) -> list[str]:
    """Split comma-separated input into trimmed, non-empty tokens.

    Accepts a single string (CLI flag) or a list of strings (config document);
    list entries may themselves contain commas.
    """
    if raw is None:
        return []
    chunks = [raw] if isinstance(raw, str) else list(raw)
    tokens: list[str] = []
    for chunk in chunks:
        for token in str(chunk).split(","):
            token = token.strip()
            if token:
                tokens.append(token)
    return tokens


def parse_ignore_severities(raw: str | Iterable[str] | None) -> frozenset[Severity]:
    """Parse severities to ignore. Unknown tokens are logged and skipped."""
    severities: set[Severity] = set()
    for token in _split_tokens(raw):
        severity = parse_severity(token)
        if severity is None:
            logger.warning("Unknown severity level: %s", token)
            continue
        severities.add(severity)
    return frozenset(severities)


def parse_ignore_rules(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Parse rule ids to ignore. Ids are not checked against the catalog."""
    return frozenset(_split_tokens(raw))


def parse_include_rule_types(raw: str | Iterable[str] | None) -> tuple[RuleType, ...]:
    """Parse rule types to include, keeping first-seen order.

    Empty or absent input selects every known rule type.
    """
    rule_types: list[RuleType] = []
    for token in _split_tokens(raw):
        rule_type = parse_rule_type(token)
        if rule_type is None:
            logger.warning("Unknown rule type: %s", token)
            continue
        if rule_type not in rule_types:
            rule_types.append(rule_type)
    return tuple(rule_types) or ALL_RULE_TYPES


def build_options(
    generate_ast: bool = False,
    templates: str | Path | None = None,
    ignore: str | Iterable[str] | None = None,
    ignore_rules: str | Iterable[str] | None = None,
    include_rule_types: str | Iterable[str] | None = None,
) -> AnalysisOptions:
    return AnalysisOptions(
        generate_ast=generate_ast,
        custom_templates_path=str(templates) if templates else None,
        include_rule_types=parse_include_rule_types(include_rule_types),
        ignore_severities=parse_ignore_severities(ignore),
        ignore_rules=parse_ignore_rules(ignore_rules),
    )


def resolve_cli_parameters(
    path: str | Path,
    templates: str | Path | None = None,
    output: str | Path | None = None,
    generate_ast: bool = False,
    ignore: str | None = None,
    ignore_rules: str | None = None,
    verbose: bool = False,
    quiet: bool = False,
) -> RunParameters:
    """Resolve the parameters of an ``analyze`` invocation."""
    return RunParameters(
        path=Path(path),
        output=Path(output) if output else None,
        verbose=verbose,
        quiet=quiet,
        options=build_options(
            generate_ast=generate_ast,
            templates=templates,
            ignore=ignore,
            ignore_rules=ignore_rules,
        ),
    )


def resolve_config_parameters(config: AuditConfig, cli_verbose: bool = False, cli_quiet: bool = False) -> RunParameters:
    """Resolve the parameters of a ``config`` invocation.

    Display flags are OR-ed: a flag given on the command line is never
    switched off by an absent or false value in the document.
    """
    return RunParameters(
        path=Path(config.analysis.path),
        output=Path(config.output.report_file),
        verbose=cli_verbose or config.display.verbose,
        quiet=cli_quiet or config.display.quiet,
        options=build_options(
            generate_ast=config.analysis.generate_ast,
            templates=config.analysis.templates,
            ignore=config.rules.ignore_severities,
            ignore_rules=config.rules.ignore_rules,
            include_rule_types=config.rules.include_rule_types,
        ),
    )
