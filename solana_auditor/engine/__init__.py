"""Default discovery, rule catalog and analysis engine."""

from solana_auditor.engine.analyzer import Analyzer, create_analyzer
from solana_auditor.engine.discovery import ast_to_json, process_directory

__all__ = ["Analyzer", "ast_to_json", "create_analyzer", "process_directory"]
