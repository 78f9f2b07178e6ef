"""Base class for line-oriented source lexers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from ..models import LineClassification


class LineLexer(ABC):
    """Contract for lexers that classify a source file one line at a time.

    A lexer instance owns all lexical state for exactly one file. Errors are
    never raised; they are recorded as strings tagged with the current line
    number and returned both on the line classification and from
    :meth:`at_eof`.
    """

    extensions: Tuple[str, ...] = ()
    project_extensions: Tuple[str, ...] = ()

    def __init__(self) -> None:
        self.line_number = 0
        self.errors: List[str] = []
        self.type_declarations = 0
        self._line = LineClassification()

    def process_line(self, raw_line: str) -> LineClassification:
        """Classify the next physical line of the file."""
        self.line_number += 1
        self._line = LineClassification()
        self._scan(raw_line)
        return self._line

    def add_error(self, message: str) -> None:
        if not message or not message.strip():
            return
        text = f"{message} (at line {self.line_number})"
        self.errors.append(text)
        self._line.errors.append(text)

    @abstractmethod
    def _scan(self, raw_line: str) -> None:
        """Update lexical state for one line and fill in ``self._line``."""

    @abstractmethod
    def at_eof(self) -> List[str]:
        """Report residual open state and return every error seen in the file."""
