"""Rule-file loader."""

from __future__ import annotations
from pathlib import Path

from ..lex import normalize_newlines


def load_lsc_text(path: str, encoding: str = "utf-8") -> str:
    """Read a rule file; line endings come back as `\\n` whatever the file used."""
    return normalize_newlines(Path(path).read_text(encoding=encoding))
