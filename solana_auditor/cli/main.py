"""Typer CLI for solana-auditor."""

from typing import NoReturn

import typer
from rich.markup import escape

from solana_auditor import __version__
from solana_auditor.catalog import find_rule, list_rules
from solana_auditor.config import settings
from solana_auditor.config_file import load_config, write_config_template
from solana_auditor.context import RunContext
from solana_auditor.engine import create_analyzer
from solana_auditor.errors import AuditorError
from solana_auditor.logging_config import configure_logging
from solana_auditor.options import resolve_cli_parameters, resolve_config_parameters
from solana_auditor.pipeline import run_analysis
from solana_auditor.reporting.console import render_rule_info, render_rule_list

app = typer.Typer(
    name="solaudit",
    help="SOLAUDIT: static analyzer for Solana/Anchor smart contracts.",
    no_args_is_help=True,
)


def _fail(run_ctx: RunContext, exc: Exception) -> NoReturn:
    run_ctx.err_console.print(f"[bold red]✗[/bold red] {escape(str(exc))}")
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"solaudit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet mode (errors only)"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit",
    ),
):
    """Global display options shared by every command."""
    configure_logging(verbose=verbose, quiet=quiet, no_color=no_color)
    ctx.obj = RunContext.create(verbose=verbose, quiet=quiet, no_color=no_color)


@app.command()
def analyze(
    ctx: typer.Context,
    path: str = typer.Option(..., "--path", "-p", help="Path to the Solana project directory"),
    templates: str = typer.Option("", "--templates", "-t", help="Directory of custom YAML rule templates"),
    output: str = typer.Option("", "--output", "-o", help="Output report file (.md is enforced)"),
    ast: bool = typer.Option(False, "--ast", help="Generate AST JSON files next to each source"),
    ignore: str = typer.Option(
        "", "--ignore", "-i", help="Severities to ignore (comma-separated: low,medium,high,informational)",
    ),
    ignore_rules: str = typer.Option("", "--ignore-rules", help="Rule IDs to ignore (comma-separated)"),
):
    """Analyze Solana smart contracts for vulnerabilities."""
    run_ctx: RunContext = ctx.obj
    params = resolve_cli_parameters(
        path=path,
        templates=templates or None,
        output=output or None,
        generate_ast=ast,
        ignore=ignore or None,
        ignore_rules=ignore_rules or None,
        verbose=run_ctx.verbose,
        quiet=run_ctx.quiet,
    )
    try:
        run_analysis(params, run_ctx)
    except AuditorError as e:
        _fail(run_ctx, e)


@app.command(name="list-rules")
def list_rules_command(
    ctx: typer.Context,
    severity: str = typer.Option("", "--severity", "-s", help="Filter by severity (high, medium, low, informational)"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="Show rule descriptions"),
):
    """List all available detection rules."""
    run_ctx: RunContext = ctx.obj
    try:
        view = list_rules(create_analyzer().rules, severity or None)
    except AuditorError as e:
        _fail(run_ctx, e)

    render_rule_list(view, run_ctx.console, detailed=detailed)


@app.command(name="rule-info")
def rule_info(
    ctx: typer.Context,
    rule_id: str = typer.Argument(help="Rule ID to show information for"),
):
    """Show information about a specific rule."""
    run_ctx: RunContext = ctx.obj
    try:
        rule = find_rule(create_analyzer().rules, rule_id)
    except AuditorError as e:
        _fail(run_ctx, e)

    if rule is None:
        run_ctx.err_console.print(f"[bold red]✗[/bold red] Rule not found: [yellow]{escape(rule_id)}[/yellow]")
        run_ctx.err_console.print("\nUse [cyan]solaudit list-rules[/cyan] to see all available rules\n")
        raise typer.Exit(code=1)

    render_rule_info(rule, run_ctx.console)


@app.command()
def init(
    ctx: typer.Context,
    output: str = typer.Option(settings.default_config_file, "--output", "-o", help="Output path for the config file"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
):
    """Initialize a new analysis configuration file."""
    run_ctx: RunContext = ctx.obj
    try:
        written = write_config_template(output, force=force)
    except (AuditorError, OSError) as e:
        _fail(run_ctx, e)

    run_ctx.console.print(f"[bold green]✓[/bold green] Created configuration file: [bright_blue]{escape(str(written))}[/bright_blue]")
    run_ctx.console.print(f"\nRun it with: [cyan]solaudit config --config {escape(str(written))}[/cyan]\n")


@app.command()
def config(
    ctx: typer.Context,
    config_path: str = typer.Option(settings.default_config_file, "--config", "-c", help="Path to configuration file"),
):
    """Run analysis with a configuration file."""
    run_ctx: RunContext = ctx.obj
    try:
        audit_config = load_config(config_path)
    except AuditorError as e:
        _fail(run_ctx, e)

    params = resolve_config_parameters(audit_config, cli_verbose=run_ctx.verbose, cli_quiet=run_ctx.quiet)
    no_color = run_ctx.no_color or audit_config.display.no_color
    if (params.verbose, params.quiet, no_color) != (run_ctx.verbose, run_ctx.quiet, run_ctx.no_color):
        configure_logging(verbose=params.verbose, quiet=params.quiet, no_color=no_color)
        run_ctx = run_ctx.with_display(verbose=params.verbose, quiet=params.quiet, no_color=no_color)

    if not params.quiet:
        run_ctx.console.print(f"\n[bold cyan]⚙[/bold cyan] Using configuration: [bright_blue]{escape(config_path)}[/bright_blue]\n")

    try:
        run_analysis(params, run_ctx)
    except AuditorError as e:
        _fail(run_ctx, e)


if __name__ == "__main__":
    app()
