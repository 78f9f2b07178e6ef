"""Feed source files through the matching lexer and collect per-file results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .lexers import CSharpLexer, LineLexer, lexer_for
from .lexers.csharp import NAMESPACE_PREFIX, USING_PREFIX, is_generated_path
from .logging import get_logger
from .models import CodeClass, LineClassification

_LOGGER = get_logger("readers")


@dataclass
class FileReport:
    """Everything learned from one source file."""

    path: str
    lines: int = 0
    chars: int = 0
    classifications: List[LineClassification] = field(default_factory=list)
    classes: List[CodeClass] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    using_decls: List[str] = field(default_factory=list)
    namespace_decls: List[str] = field(default_factory=list)
    class_comments: int = 0
    method_comments: int = 0
    generated: bool = False

    @property
    def is_empty(self) -> bool:
        return self.lines == 0


def read_source(path: Path, *, display_name: Optional[str] = None) -> Optional[FileReport]:
    """Classify every line of ``path``.

    Returns None when no lexer handles the suffix. Generated C# files come
    back with ``generated`` set and no lines counted.
    """
    lexer = lexer_for(path)
    if lexer is None:
        return None

    report = FileReport(path=display_name or path.name)
    if isinstance(lexer, CSharpLexer) and is_generated_path(path):
        report.generated = True
        _LOGGER.debug("Skipping generated file %s", path)
        return report

    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for raw in handle:
            line = raw.rstrip("\r\n")
            classification = lexer.process_line(line)
            report.chars += len(line)
            if isinstance(lexer, CSharpLexer) and lexer.generated:
                report.generated = True
                _LOGGER.debug("Skipping auto-generated file %s", path)
                return _discard(report)
            report.classifications.append(classification)
            _collect_declarations(report, classification)

    report.lines = lexer.line_number
    report.errors = lexer.at_eof()
    _collect_classes(report, lexer)
    return report


def _discard(report: FileReport) -> FileReport:
    report.classifications = []
    report.using_decls = []
    report.namespace_decls = []
    report.lines = 0
    return report


def _collect_declarations(report: FileReport, classification: LineClassification) -> None:
    code = classification.code
    if code.startswith(USING_PREFIX):
        report.using_decls.append(code[len(USING_PREFIX):])
    elif code.startswith(NAMESPACE_PREFIX):
        report.namespace_decls.append(code[len(NAMESPACE_PREFIX):])


def _collect_classes(report: FileReport, lexer: LineLexer) -> None:
    if not isinstance(lexer, CSharpLexer):
        return
    report.classes = list(lexer.classes)
    report.class_comments = lexer.class_comments
    report.method_comments = lexer.method_comments


__all__ = ["FileReport", "read_source"]
