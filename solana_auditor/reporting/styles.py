"""Severity display descriptors for terminal output."""

from __future__ import annotations

from dataclasses import dataclass

from solana_auditor.models import Severity


@dataclass(frozen=True)
class SeverityStyle:
    marker: str
    style: str
    text_style: str


_SEVERITY_STYLES: dict[Severity, SeverityStyle] = {
    Severity.HIGH: SeverityStyle(marker="🔴", style="bold red", text_style="red"),
    Severity.MEDIUM: SeverityStyle(marker="🟡", style="bold yellow", text_style="yellow"),
    Severity.LOW: SeverityStyle(marker="🟢", style="bold blue", text_style="blue"),
    Severity.INFORMATIONAL: SeverityStyle(marker="ℹ️", style="cyan", text_style="cyan"),
}


def severity_style(severity: Severity) -> SeverityStyle:
    return _SEVERITY_STYLES[severity]


def styled(text: str, style: str) -> str:
    """Wrap already-escaped text in a Rich markup style tag."""
    return f"[{style}]{text}[/{style}]"
