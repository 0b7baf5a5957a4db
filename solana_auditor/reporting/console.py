"""Rich terminal rendering for analysis results and the rule catalog."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from solana_auditor.aggregate import AggregatedFindings
from solana_auditor.catalog import CatalogView
from solana_auditor.models import SEVERITY_ORDER, Rule
from solana_auditor.reporting.styles import severity_style, styled

BANNER = "SOLAUDIT · Static Analyzer for Solana Smart Contracts"


def render_banner(console: Console) -> None:
    console.print(Panel(f"[bold bright_cyan]{BANNER}[/bold bright_cyan]", border_style="cyan", expand=False))


def _section(console: Console, title: str) -> None:
    console.rule(style="dim")
    console.print(f"\n[bold bright_white]{title}[/bold bright_white]\n")


def render_summary(aggregated: AggregatedFindings, console: Console) -> None:
    """Render total and per-severity counts as reported by the engine."""
    _section(console, "📊 ANALYSIS SUMMARY")

    if aggregated.total == 0:
        console.print("  [bold green]✓[/bold green] No vulnerabilities found!\n")
        return

    console.print(f"  Total findings: [bold]{aggregated.total}[/bold]\n")

    for severity in SEVERITY_ORDER:
        count = aggregated.reported_counts.get(severity, 0)
        if not count:
            continue
        desc = severity_style(severity)
        label = f"{severity.label}:"
        console.print(f"  {desc.marker} {label:<15} {styled(str(count), desc.style)}")

    console.print()


def render_findings(aggregated: AggregatedFindings, console: Console, verbose: bool = False) -> None:
    """Render every finding grouped by severity with one running index."""
    if aggregated.total == 0:
        return

    _section(console, "🔍 DETAILED FINDINGS")

    index = 1
    for group in aggregated.groups:
        desc = severity_style(group.severity)
        console.print(f"{desc.marker} {styled(f'{group.severity.label} Severity', desc.style)}\n")

        for finding in group.findings:
            console.print(f"  [bold]{index}.[/bold] {styled(escape(finding.description), desc.style)}")
            console.print(f"     📍 {styled(escape(str(finding.location)), desc.text_style)}")

            if verbose:
                if finding.code_snippet:
                    console.print(f"     [dim]Code:[/dim] {styled(escape(finding.code_snippet), desc.text_style)}")
                if finding.recommendations:
                    joined = ", ".join(finding.recommendations)
                    console.print(f"     💡 {styled(escape(joined), 'green')}")

            console.print()
            index += 1


def render_rule_list(view: CatalogView, console: Console, detailed: bool = False) -> None:
    console.print("\n[bold bright_cyan]📋 Available Detection Rules[/bold bright_cyan]\n")

    if view.total == 0:
        console.print("  [yellow]⚠[/yellow] No rules found")
        return

    for group in view.groups:
        desc = severity_style(group.severity)
        console.print(
            f"{desc.marker} {styled(f'{group.severity.label} Severity', desc.style)} ({group.count} rules)\n"
        )
        for rule in group.rules:
            console.print(f"  • [bold]{escape(rule.id)}[/bold] - {escape(rule.title)}")
            if detailed:
                console.print(f"    [dim]{escape(rule.description)}[/dim]")
                console.print()
        console.print()

    console.print(f"Total: [bold]{view.total}[/bold] rules\n")


def render_rule_info(rule: Rule, console: Console) -> None:
    desc = severity_style(rule.severity)

    console.print("\n[bold bright_cyan]📖 Rule Information[/bold bright_cyan]\n")
    console.print(f"  [bold]ID:[/bold] {escape(rule.id)}")
    console.print(f"  [bold]Title:[/bold] {escape(rule.title)}")
    console.print(f"  [bold]Type:[/bold] {rule.rule_type.value}")
    console.print(f"  [bold]Severity:[/bold] {desc.marker} {styled(rule.severity.label, desc.style)}\n")
    console.print("  [bold]Description:[/bold]")
    console.print(f"  {escape(rule.description)}\n")

    if rule.recommendations:
        console.print("  [bold]Recommendations:[/bold]")
        for item in rule.recommendations:
            console.print(f"  • {escape(item)}")
        console.print()
