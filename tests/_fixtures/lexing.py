"""Feed snippets through a lexer the way the file reader does."""

from __future__ import annotations

import textwrap
from typing import List, Tuple

from codecounter.lexers import LineLexer
from codecounter.models import LineClassification


def lex(lexer: LineLexer, source: str) -> Tuple[List[LineClassification], List[str]]:
    """Return per-line classifications and the end-of-file errors."""
    text = textwrap.dedent(source).lstrip("\n")
    lines = [lexer.process_line(line) for line in text.splitlines()]
    return lines, lexer.at_eof()


def buckets(lines: List[LineClassification]) -> List[str]:
    return [line.bucket for line in lines]


__all__ = ["buckets", "lex"]
