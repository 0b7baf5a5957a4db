"""Run-scoped display context shared by the CLI and the reporters."""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.console import Console


@dataclass(frozen=True)
class RunContext:
    """Consoles and display flags for one invocation."""
    console: Console
    err_console: Console
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False

    @classmethod
    def create(cls, verbose: bool = False, quiet: bool = False, no_color: bool = False) -> RunContext:
        return cls(
            console=Console(no_color=no_color, highlight=False, emoji=False),
            err_console=Console(stderr=True, no_color=no_color, highlight=False, emoji=False),
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
        )

    def with_display(self, verbose: bool, quiet: bool, no_color: bool) -> RunContext:
        """Return the context for a run whose display flags come from a config document."""
        if no_color == self.no_color:
            return replace(self, verbose=verbose, quiet=quiet)
        return replace(
            self,
            console=Console(no_color=no_color, highlight=False, emoji=False, file=self.console.file),
            err_console=Console(stderr=True, no_color=no_color, highlight=False, emoji=False),
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
        )
