"""Configuration for solana-auditor."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable overrides."""

    default_config_file: str = "solaudit.yaml"
    source_extensions: list[str] = [".rs"]
    exclude_dirs: list[str] = ["target", ".git", "node_modules", ".anchor"]
    max_file_size_kb: int = 1024
    report_extension: str = ".md"
    report_extensions_accepted: list[str] = [".md", ".markdown"]
    ast_extension: str = ".json"
    snippet_max_chars: int = 200

    model_config = {"env_prefix": "SOLAUDIT_"}


settings = Settings()
