"""Detection rules for regex-based Solana/Anchor analysis."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from solana_auditor.errors import EngineError
from solana_auditor.models import Rule, RuleType, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionRule:
    """A catalog rule paired with its line pattern."""
    rule: Rule
    pattern: re.Pattern

    @property
    def id(self) -> str:
        return self.rule.id


def _rule(rule_id: str, title: str, severity: Severity, rule_type: RuleType, regex: str,
          desc: str, recommendations: tuple[str, ...] = ()) -> DetectionRule:
    return DetectionRule(
        rule=Rule(
            id=rule_id,
            title=title,
            description=desc,
            severity=severity,
            rule_type=rule_type,
            recommendations=list(recommendations),
        ),
        pattern=re.compile(regex),
    )


BUILTIN_RULES: list[DetectionRule] = [
    # --- Account validation ---
    _rule(
        "SOL-001",
        "Unchecked AccountInfo",
        Severity.HIGH,
        RuleType.SOLANA,
        r"""\bAccountInfo\s*<\s*'\w+\s*>""",
        "Raw AccountInfo is used without owner or signer validation",
        ("Use a typed Account<'info, T> or Signer<'info>", "Verify the account owner before use"),
    ),
    _rule(
        "SOL-002",
        "UncheckedAccount without safety comment",
        Severity.HIGH,
        RuleType.ANCHOR,
        r"""\bUncheckedAccount\s*<""",
        "UncheckedAccount bypasses Anchor's account validation",
        ("Document the manual checks with a /// CHECK: comment", "Prefer a constrained account type"),
    ),
    _rule(
        "SOL-003",
        "Arbitrary cross-program invocation",
        Severity.HIGH,
        RuleType.SOLANA,
        r"""\binvoke(?:_signed)?\s*\(""",
        "Cross-program invocation target may be attacker-controlled",
        ("Check the invoked program id against the expected program",),
    ),

    # --- State handling ---
    _rule(
        "SOL-004",
        "Re-initialization via init_if_needed",
        Severity.MEDIUM,
        RuleType.ANCHOR,
        r"""\binit_if_needed\b""",
        "init_if_needed allows an existing account to be re-initialized",
        ("Use init and guard re-initialization explicitly",),
    ),
    _rule(
        "SOL-005",
        "Unchecked arithmetic",
        Severity.MEDIUM,
        RuleType.GENERAL,
        r"""\b\w+(?:\.\w+)*\s*[+\-*]=\s*[\w.()]+\s*;""",
        "Arithmetic operation may overflow or underflow",
        ("Use checked_add, checked_sub or checked_mul", "Enable overflow-checks in release builds"),
    ),
    _rule(
        "SOL-006",
        "Direct lamport manipulation",
        Severity.MEDIUM,
        RuleType.SOLANA,
        r"""(?:try_borrow_mut_lamports|lamports\.borrow_mut)\s*\(""",
        "Lamports are moved by mutating balances directly",
        ("Verify the account is owned by the program", "Keep total lamports balanced"),
    ),
    _rule(
        "SOL-007",
        "Unvalidated remaining accounts",
        Severity.MEDIUM,
        RuleType.ANCHOR,
        r"""\bremaining_accounts\b""",
        "ctx.remaining_accounts are not validated by Anchor",
        ("Validate owner, signer and key of every remaining account",),
    ),
    _rule(
        "SOL-008",
        "Unsafe block",
        Severity.MEDIUM,
        RuleType.GENERAL,
        r"""\bunsafe\s*\{""",
        "unsafe code in an on-chain program",
        ("Remove the unsafe block or document its invariants",),
    ),

    # --- Robustness ---
    _rule(
        "SOL-009",
        "Panicking unwrap",
        Severity.LOW,
        RuleType.GENERAL,
        r"""\.unwrap\(\)""",
        "unwrap() aborts the transaction with an opaque error",
        ("Propagate the error with ? and a custom error code",),
    ),
    _rule(
        "SOL-010",
        "Explicit panic",
        Severity.LOW,
        RuleType.GENERAL,
        r"""\.expect\s*\(|\bpanic!\s*\(""",
        "expect() or panic! aborts the transaction",
        ("Return a descriptive program error instead",),
    ),

    # --- Informational ---
    _rule(
        "SOL-011",
        "Hardcoded public key",
        Severity.INFORMATIONAL,
        RuleType.SOLANA,
        r"""\bpubkey!\s*\(|Pubkey::from_str\s*\(""",
        "Public key is hardcoded in program logic",
        ("Move addresses into configuration accounts or constants",),
    ),
    _rule(
        "SOL-012",
        "Program log statement",
        Severity.INFORMATIONAL,
        RuleType.GENERAL,
        r"""\bmsg!\s*\(""",
        "msg! consumes compute units",
        ("Remove debug logging from production builds",),
    ),
]


# --- Custom YAML templates ---

class TemplateRule(BaseModel):
    id: str
    title: str
    description: str
    severity: Severity
    pattern: str
    rule_type: RuleType = RuleType.GENERAL
    recommendations: list[str] = []


class TemplateDocument(BaseModel):
    rules: list[TemplateRule] = []


def _compile_template(item: TemplateRule, source: Path) -> DetectionRule:
    try:
        pattern = re.compile(item.pattern)
    except re.error as e:
        raise EngineError(f"Invalid pattern for rule {item.id} in {source}: {e}") from e

    return DetectionRule(
        rule=Rule(
            id=item.id,
            title=item.title,
            description=item.description,
            severity=item.severity,
            rule_type=item.rule_type,
            recommendations=item.recommendations,
        ),
        pattern=pattern,
    )


def load_template_rules(templates_path: str | Path) -> list[DetectionRule]:
    """Load custom rules from every YAML template in a directory."""
    root = Path(templates_path)
    if not root.is_dir():
        raise EngineError(f"Templates directory not found: {root}")

    rules: list[DetectionRule] = []
    for template in sorted([*root.glob("*.yaml"), *root.glob("*.yml")]):
        try:
            data = yaml.safe_load(template.read_text(encoding="utf-8")) or {}
            document = TemplateDocument.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise EngineError(f"Invalid rule template {template}: {e}") from e

        for item in document.rules:
            rules.append(_compile_template(item, template))
        logger.debug("Loaded %d rule(s) from %s", len(document.rules), template)

    return rules


def build_rule_set(templates_path: str | Path | None = None) -> list[DetectionRule]:
    """Built-in rules followed by any custom template rules.

    Raises:
        EngineError: a template is invalid or reuses an existing rule id.
    """
    rules = list(BUILTIN_RULES)
    if templates_path:
        rules.extend(load_template_rules(templates_path))

    seen: set[str] = set()
    for detection in rules:
        key = detection.id.casefold()
        if key in seen:
            raise EngineError(f"Duplicate rule id: {detection.id}")
        seen.add(key)

    return rules
