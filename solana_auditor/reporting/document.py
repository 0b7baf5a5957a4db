"""Persisting analysis results as a document report."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from solana_auditor.config import settings
from solana_auditor.errors import PersistenceError, ReportError
from solana_auditor.models import AnalysisResult
from solana_auditor.reporting.markdown import ReportGenerator

logger = logging.getLogger(__name__)


def normalize_report_path(path: str | Path) -> Path:
    """Force the document extension onto a report path.

    ``report`` becomes ``report.md`` and ``report.txt`` becomes ``report.md``;
    paths already ending in an accepted document extension are unchanged.

    Raises:
        PersistenceError: the path has no file name, such as ``.``, ``..`` or ``/``.
    """
    report_path = Path(path)
    if report_path.name in ("", ".", ".."):
        raise PersistenceError(f"Invalid report path: {path}")
    accepted = {ext.lower() for ext in settings.report_extensions_accepted}
    if report_path.suffix.lower() in accepted:
        return report_path
    return report_path.with_suffix(settings.report_extension)


def save_report(
    result: AnalysisResult,
    output_path: str | Path,
    project_path: str | Path,
    generator_factory: Callable[[list, str], ReportGenerator] = ReportGenerator,
) -> Path:
    """Write ``result`` as a document and return the final path.

    Raises:
        PersistenceError: the report generator could not write the file.
    """
    final_path = normalize_report_path(output_path)
    generator = generator_factory(result.findings, str(project_path))

    try:
        generator.save_markdown_report(str(final_path))
    except (ReportError, OSError) as e:
        raise PersistenceError(f"Failed to save report: {e}") from e

    logger.debug("Report written to %s", final_path)
    return final_path
