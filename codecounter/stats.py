"""Aggregate line statistics across files and projects."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

from .models import LineClassification
from .readers import FileReport


@dataclass
class CodeStats:
    """Running totals for a counter run.

    ``lines`` is the sum of the five line buckets. ``commented_out_code`` is
    not a bucket of its own: it counts the subset of ``comment_blank`` lines
    that look like disabled code rather than prose.
    """

    projects: int = 0
    directories: int = 0
    files: int = 0
    chars: int = 0
    errors: int = 0

    lines: int = 0
    lines_blank: int = 0
    comment_blank: int = 0
    commented_out_code: int = 0
    comment_lines: int = 0
    lines_code: int = 0
    lines_code_and_comment: int = 0

    classes: int = 0
    class_comments: int = 0
    methods: int = 0
    method_comments: int = 0

    def count_line(self, line: LineClassification) -> bool:
        """Add one line to its bucket; True when it holds code or comment text."""
        bucket = line.bucket
        if bucket == "code_and_comment":
            self.lines_code_and_comment += 1
        elif bucket == "comment":
            self.comment_lines += 1
        elif bucket == "code":
            self.lines_code += 1
        elif bucket == "comment_blank":
            self.comment_blank += 1
            if line.has_comment_code:
                self.commented_out_code += 1
        else:
            self.lines_blank += 1

        self.classes += line.declarations
        self.methods += line.methods
        return line.is_counted

    def record_file(self, report: FileReport) -> None:
        """Fold a finished file into the totals; empty and generated files only add chars."""
        self.chars += report.chars
        self.errors += len(report.errors)
        if report.generated or report.is_empty:
            return

        self.files += 1
        self.lines += report.lines
        for line in report.classifications:
            self.count_line(line)
        self.class_comments += report.class_comments
        self.method_comments += report.method_comments

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def render(self) -> str:
        """Return ``name = value`` lines in a fixed order."""
        return "\n".join(f"{name} = {value}" for name, value in self.as_dict().items())


__all__ = ["CodeStats"]
