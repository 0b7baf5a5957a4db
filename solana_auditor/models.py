"""Shared Pydantic models for solana-auditor."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# --- Enums ---

class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFORMATIONAL = "informational"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RuleType(str, Enum):
    SOLANA = "solana"
    ANCHOR = "anchor"
    GENERAL = "general"


# Canonical display order for every severity-grouped view.
SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFORMATIONAL,
)

ALL_RULE_TYPES: tuple[RuleType, ...] = tuple(RuleType)


def parse_severity(token: str) -> Severity | None:
    """Map a free-text token to a Severity, or None if unrecognized."""
    try:
        return Severity(token.strip().lower())
    except ValueError:
        return None


def parse_rule_type(token: str) -> RuleType | None:
    """Map a free-text token to a RuleType, or None if unrecognized."""
    try:
        return RuleType(token.strip().lower())
    except ValueError:
        return None


# --- Analysis configuration ---

class AnalysisOptions(BaseModel):
    """Canonical configuration for one analysis run."""

    model_config = ConfigDict(frozen=True)

    generate_ast: bool = False
    custom_templates_path: str | None = None
    include_rule_types: tuple[RuleType, ...] = ALL_RULE_TYPES
    ignore_severities: frozenset[Severity] = frozenset()
    ignore_rules: frozenset[str] = frozenset()


class RunParameters(BaseModel):
    """Resolved inputs for the analysis pipeline."""

    model_config = ConfigDict(frozen=True)

    path: Path
    output: Path | None = None
    verbose: bool = False
    quiet: bool = False
    options: AnalysisOptions = AnalysisOptions()


# --- Parsed sources ---

class AstItem(BaseModel):
    kind: str
    name: str
    line: int


class ParsedFile(BaseModel):
    """Lightweight parsed representation of one Rust source file."""
    path: str
    source: str
    items: list[AstItem] = []

    @property
    def lines(self) -> list[str]:
        return self.source.splitlines()


# --- Rules and findings ---

class Rule(BaseModel):
    """A single detection rule in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    severity: Severity
    rule_type: RuleType = RuleType.GENERAL
    recommendations: list[str] = []


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int = Field(ge=1)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


class Finding(BaseModel):
    """A single issue reported by the engine."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str
    location: Location
    code_snippet: str | None = None
    recommendations: list[str] = []
    rule_id: str = ""
    title: str = ""


class AnalysisStats(BaseModel):
    findings_by_severity: dict[Severity, int] = {}
    files_analyzed: int = 0
    rules_applied: int = 0


class AnalysisResult(BaseModel):
    """Result of one engine invocation."""
    findings: list[Finding] = []
    stats: AnalysisStats = Field(default_factory=AnalysisStats)
