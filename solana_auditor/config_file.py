"""Declarative YAML configuration documents for ``solaudit config``."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from solana_auditor.errors import ConfigExistsError, ConfigNotFoundError, ConfigParseError

logger = logging.getLogger(__name__)


class AnalysisSection(BaseModel):
    path: str
    generate_ast: bool = False
    templates: str | None = None


class OutputSection(BaseModel):
    report_file: str


class RulesSection(BaseModel):
    ignore_severities: list[str] = []
    ignore_rules: list[str] = []
    include_rule_types: list[str] = []


class DisplaySection(BaseModel):
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False


class AuditConfig(BaseModel):
    """A parsed configuration document."""
    analysis: AnalysisSection
    output: OutputSection
    rules: RulesSection = RulesSection()
    display: DisplaySection = DisplaySection()

    @field_validator("rules", "display", mode="before")
    @classmethod
    def _empty_section(cls, value):
        # A section whose keys are all commented out loads as None.
        return {} if value is None else value


CONFIG_TEMPLATE = """\
# solaudit configuration
# Run with: solaudit config --config {filename}

analysis:
  # Directory containing the Solana/Anchor program to analyze
  path: "./programs"
  # Write a JSON dump of each parsed file next to its source
  generate_ast: false
  # Directory of custom YAML rule templates (optional)
  # templates: "./audit-rules"

output:
  # Markdown report location; the .md extension is added when missing
  report_file: "audit-report.md"

rules:
  # Severities to skip: high, medium, low, informational
  ignore_severities: []
  # Rule ids to skip, e.g. ["SOL-005"]
  ignore_rules: []
  # Rule types to run: solana, anchor, general (empty = all)
  include_rule_types: []

display:
  verbose: false
  quiet: false
  no_color: false
"""


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err["loc"])
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_config(text: str, source: str = "<string>") -> AuditConfig:
    """Parse and validate a YAML configuration document."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse configuration file {source}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(f"Failed to parse configuration file {source}: expected a mapping at top level")

    try:
        return AuditConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(
            f"Failed to parse configuration file {source}: {_format_validation_error(e)}"
        ) from e


def load_config(path: str | Path) -> AuditConfig:
    """Load a configuration document from disk."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigNotFoundError(
            f"Configuration file not found: {config_path}. Create one with: solaudit init"
        )

    logger.debug("Loading configuration from %s", config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Failed to read configuration file {config_path}: {e}") from e

    return parse_config(text, source=str(config_path))


def write_config_template(path: str | Path, force: bool = False) -> Path:
    """Write the template configuration document used by ``solaudit init``."""
    config_path = Path(path)
    if config_path.exists() and not force:
        raise ConfigExistsError(
            f"Configuration file already exists: {config_path}. Use --force to overwrite it"
        )

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(CONFIG_TEMPLATE.format(filename=config_path.name), encoding="utf-8")
    return config_path
