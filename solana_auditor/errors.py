"""Exception hierarchy for solana-auditor.

Every fatal condition in a run is raised as a subclass of ``AuditorError`` so
the CLI can report it on the error console and exit non-zero with a single
except clause.
"""


class AuditorError(Exception):
    """Base exception for all solana-auditor errors."""
    pass


# =============================================================================
# Input validation
# =============================================================================

class InputValidationError(AuditorError):
    """Invalid user input detected before any analysis work starts."""
    pass


class InvalidPathError(InputValidationError):
    """Analysis path is missing or not a directory."""
    pass


class UnknownSeverityError(InputValidationError):
    """A severity token used as a hard filter is not recognized."""
    pass


class ConfigError(InputValidationError):
    """Base exception for configuration document errors."""
    pass


class ConfigNotFoundError(ConfigError):
    """Configuration document does not exist."""
    pass


class ConfigParseError(ConfigError):
    """Configuration document is malformed or missing required keys."""
    pass


class ConfigExistsError(ConfigError):
    """Refusing to overwrite an existing configuration document."""
    pass


# =============================================================================
# Pipeline phases
# =============================================================================

class DiscoveryError(AuditorError):
    """Source discovery or parsing failed."""
    pass


class EngineError(AuditorError):
    """The analysis engine failed to build or run."""
    pass


class ReportError(AuditorError):
    """The report generator could not render or write a document."""
    pass


class PersistenceError(AuditorError):
    """A file produced by the pipeline could not be written."""
    pass
