"""Line lexers for the supported source dialects and lookup by file suffix."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Type

from .base import LineLexer
from .cfamily import CFamilyLexer
from .csharp import CSharpLexer

_BUILTIN_LEXERS: List[Type[LineLexer]] = [CSharpLexer, CFamilyLexer]


def _by_suffix(attribute: str) -> Dict[str, Type[LineLexer]]:
    mapping: Dict[str, Type[LineLexer]] = {}
    for lexer_cls in _BUILTIN_LEXERS:
        for suffix in getattr(lexer_cls, attribute):
            mapping[suffix] = lexer_cls
    return mapping


SOURCE_SUFFIXES = _by_suffix("extensions")
PROJECT_SUFFIXES = _by_suffix("project_extensions")
ALL_SUFFIXES = tuple(SOURCE_SUFFIXES) + tuple(PROJECT_SUFFIXES)


def lexer_for(path: Path | str) -> Optional[LineLexer]:
    """Return a fresh lexer for ``path`` or None when the suffix is unknown.

    Suffixes are matched case-sensitively, like the file walker does.
    """
    lexer_cls = SOURCE_SUFFIXES.get(Path(path).suffix)
    if lexer_cls is None:
        return None
    return lexer_cls()


def is_source_file(path: Path | str) -> bool:
    return Path(path).suffix in SOURCE_SUFFIXES


def is_project_file(path: Path | str) -> bool:
    return Path(path).suffix in PROJECT_SUFFIXES


__all__ = [
    "ALL_SUFFIXES",
    "CFamilyLexer",
    "CSharpLexer",
    "LineLexer",
    "PROJECT_SUFFIXES",
    "SOURCE_SUFFIXES",
    "is_project_file",
    "is_source_file",
    "lexer_for",
]
