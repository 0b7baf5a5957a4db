"""Analysis pipeline: path validation → discovery → analysis → reporting.

States advance strictly in order; any ``AuditorError`` moves the pipeline to
``FAILED`` and is re-raised for the CLI to report.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.markup import escape

from solana_auditor.aggregate import AggregatedFindings, aggregate
from solana_auditor.config import settings
from solana_auditor.context import RunContext
from solana_auditor.engine import ast_to_json, create_analyzer, process_directory
from solana_auditor.errors import AuditorError, EngineError, InvalidPathError, PersistenceError
from solana_auditor.models import AnalysisResult, ParsedFile, RunParameters
from solana_auditor.reporting.console import render_banner, render_findings, render_summary
from solana_auditor.reporting.document import save_report
from solana_auditor.reporting.markdown import ReportGenerator

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    VALIDATING_PATH = "validating_path"
    DISCOVERING = "discovering"
    EMITTING_AST = "emitting_ast"
    BUILDING_OPTIONS = "building_options"
    ANALYZING = "analyzing"
    AGGREGATING = "aggregating"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    state: PipelineState
    files_discovered: int = 0
    ast_files: list[Path] = field(default_factory=list)
    result: AnalysisResult | None = None
    aggregated: AggregatedFindings | None = None
    report_path: Path | None = None
    elapsed_seconds: float | None = None


def ast_output_path(source_path: str | Path) -> Path:
    return Path(source_path).with_suffix(settings.ast_extension)


class AnalysisPipeline:
    """One analysis run over a project directory."""

    def __init__(
        self,
        params: RunParameters,
        ctx: RunContext,
        discover: Callable[[Path], list[ParsedFile]] = process_directory,
        analyzer_factory: Callable = create_analyzer,
        report_generator: Callable = ReportGenerator,
    ):
        self.params = params
        self.ctx = ctx
        self.discover = discover
        self.analyzer_factory = analyzer_factory
        self.report_generator = report_generator
        self.state = PipelineState.VALIDATING_PATH
        self.history: list[PipelineState] = [self.state]

    @property
    def _chatty(self) -> bool:
        return not self.params.quiet

    def _enter(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _status(self, message: str):
        # The spinner must be closed before anything else is printed.
        if self._chatty:
            return self.ctx.console.status(f"[cyan]{message}", spinner="dots")
        return nullcontext()

    def _say(self, markup: str) -> None:
        if self._chatty:
            self.ctx.console.print(markup)

    def run(self) -> PipelineOutcome:
        try:
            return self._run()
        except AuditorError:
            self._enter(PipelineState.FAILED)
            raise

    def _run(self) -> PipelineOutcome:
        start = time.perf_counter()
        path = self.params.path
        shown_path = escape(str(path))
        outcome = PipelineOutcome(state=self.state)

        if self._chatty:
            render_banner(self.ctx.console)

        if not path.exists():
            raise InvalidPathError(f"Path does not exist: {path}")
        if not path.is_dir():
            raise InvalidPathError(f"Path is not a directory: {path}")

        self._say(f"\n[bold cyan]→[/bold cyan] Analyzing directory: [bright_blue]{shown_path}[/bright_blue]\n")

        self._enter(PipelineState.DISCOVERING)
        with self._status("Scanning for Rust files..."):
            parsed_files = self.discover(path)
        outcome.files_discovered = len(parsed_files)

        if not parsed_files:
            self.ctx.err_console.print(
                f"\n[bold yellow]⚠[/bold yellow] No Rust files found in [yellow]{shown_path}[/yellow]"
            )
            self._enter(PipelineState.DONE)
            outcome.state = self.state
            return outcome

        self._say(
            f"[bold green]✓[/bold green] Found [bold bright_green]{len(parsed_files)}[/bold bright_green] "
            "Rust file(s) to analyze\n"
        )

        if self.params.options.generate_ast:
            self._enter(PipelineState.EMITTING_AST)
            outcome.ast_files = self._emit_ast(parsed_files)

        self._enter(PipelineState.BUILDING_OPTIONS)
        options = self.params.options
        logger.debug("Analysis options: %s", options)

        self._enter(PipelineState.ANALYZING)
        self._say("[bold]🔍 Running security analysis...[/bold]\n")
        try:
            with self._status("Analyzing code for vulnerabilities..."):
                analyzer = self.analyzer_factory(options)
                result = analyzer.analyze_files(parsed_files)
        except EngineError as e:
            raise EngineError(f"Analysis failed: {e}") from e
        outcome.elapsed_seconds = time.perf_counter() - start
        outcome.result = result
        self._say(f"[bold green]✓[/bold green] Analysis completed in {outcome.elapsed_seconds:.2f}s\n")

        self._enter(PipelineState.AGGREGATING)
        aggregated = aggregate(result)
        outcome.aggregated = aggregated

        self._enter(PipelineState.REPORTING)
        if self._chatty:
            render_summary(aggregated, self.ctx.console)

        if self.params.output is not None:
            outcome.report_path = save_report(result, self.params.output, path, self.report_generator)
            self._say(f"\n📄 Report saved to: [bright_green]{escape(str(outcome.report_path))}[/bright_green]\n")
        elif self._chatty:
            render_findings(aggregated, self.ctx.console, verbose=self.params.verbose)

        self._say("\n[bold green]✓[/bold green] Analysis completed successfully!\n")

        self._enter(PipelineState.DONE)
        outcome.state = self.state
        return outcome

    def _emit_ast(self, parsed_files: list[ParsedFile]) -> list[Path]:
        self._say("[bold cyan]→[/bold cyan] Generating AST JSON files...\n")

        written = []
        for parsed in parsed_files:
            json_path = ast_output_path(parsed.path)
            try:
                json_path.write_text(ast_to_json(parsed), encoding="utf-8")
            except OSError as e:
                raise PersistenceError(f"Failed to write AST file {json_path}: {e}") from e
            written.append(json_path)
            self._say(f"  [green]✓[/green] [dim]{escape(str(json_path))}[/dim]")

        self._say("")
        return written


def run_analysis(params: RunParameters, ctx: RunContext, **collaborators) -> PipelineOutcome:
    return AnalysisPipeline(params, ctx, **collaborators).run()
