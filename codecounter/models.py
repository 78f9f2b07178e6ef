"""Core data models shared across codecounter components."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Marker:
    """Location of a token in a source file (1-based line, 0-based offset)."""

    line: int
    offset: int


@dataclass
class LineClassification:
    """Per-line result produced by a lexer.

    ``code`` holds the comment-stripped remainder of the line for lexers that
    extract it (C# only); ``declarations`` and ``methods`` count the type and
    method declarations recognised on this line.
    """

    has_code: bool = False
    has_comment: bool = False
    has_comment_text: bool = False
    has_comment_code: bool = False
    indent: int = 0
    code: str = ""
    declarations: int = 0
    methods: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def bucket(self) -> str:
        """Return the single statistics bucket this line falls into."""
        if self.has_code and self.has_comment_text:
            return "code_and_comment"
        if self.has_comment_text:
            return "comment"
        if self.has_code:
            return "code"
        if self.has_comment:
            return "comment_blank"
        return "blank"

    @property
    def is_counted(self) -> bool:
        """True when the line holds code or real comment text."""
        return self.has_code or self.has_comment_text


@dataclass
class CodeClass:
    """A type declared in a source file along with its method signatures."""

    name: str
    methods: List[str] = field(default_factory=list)
