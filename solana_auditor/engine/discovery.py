"""Rust source discovery and lightweight item extraction."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from solana_auditor.config import settings
from solana_auditor.errors import DiscoveryError
from solana_auditor.models import AstItem, ParsedFile

logger = logging.getLogger(__name__)

# Top-level Rust items and the Anchor attributes that mark program structure.
_ITEM_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("function", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+(\w+)")),
    ("struct", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?struct\s+(\w+)")),
    ("enum", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?enum\s+(\w+)")),
    ("trait", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?trait\s+(\w+)")),
    ("impl", re.compile(r"^\s*impl(?:<[^>]*>)?\s+([\w:<>' ,]+?)\s*(?:\{|$|where)")),
    ("module", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?mod\s+(\w+)")),
    ("attribute", re.compile(r"^\s*#\[(program|account|derive\(Accounts\)|error_code|event)")),
]


def _iter_source_files(root: Path) -> list[Path]:
    extensions = {ext.lower() for ext in settings.source_extensions}
    excluded = set(settings.exclude_dirs)
    max_bytes = settings.max_file_size_kb * 1024

    files = []
    for path in root.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in extensions:
            continue
        if any(part in excluded for part in path.relative_to(root).parts):
            continue
        if path.stat().st_size > max_bytes:
            logger.info("Skipping %s: larger than %d KB", path, settings.max_file_size_kb)
            continue
        files.append(path)
    return sorted(files)


def parse_source(path: str, source: str) -> ParsedFile:
    """Extract top-level items from Rust source text."""
    items: list[AstItem] = []
    for line_no, line in enumerate(source.splitlines(), start=1):
        for kind, pattern in _ITEM_PATTERNS:
            match = pattern.match(line)
            if match:
                items.append(AstItem(kind=kind, name=match.group(1).strip(), line=line_no))
                break
    return ParsedFile(path=path, source=source, items=items)


def process_directory(path: str | Path) -> list[ParsedFile]:
    """Discover and parse every Rust source file under ``path``.

    Returns an empty list when the directory holds no eligible files.
    """
    root = Path(path)
    try:
        files = _iter_source_files(root)
    except OSError as e:
        raise DiscoveryError(f"Failed to scan {root}: {e}") from e

    parsed = []
    for file_path in files:
        try:
            source = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DiscoveryError(f"Failed to read {file_path}: {e}") from e
        parsed.append(parse_source(str(file_path), source))
        logger.debug("Parsed %s (%d items)", file_path, len(parsed[-1].items))

    return parsed


def ast_to_json(parsed: ParsedFile) -> str:
    """Serialize a parsed file's item tree to JSON."""
    return parsed.model_dump_json(indent=2, include={"path", "items"})
