"""Line classifier for C# sources.

Unlike the C-family lexer this one does not model every construct. It only
follows what can span lines (block comments and verbatim strings) plus the
brace depth, and strips comments off each line. Type and method declarations
are then recognised on the comment-free remainder with a few textual rules.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from .base import LineLexer
from ..models import CodeClass, Marker

GENERATED_MARKER = "<auto-generated"
GENERATED_FILE_SUFFIXES = ("AssemblyInfo.cs",)

USING_PREFIX = "using "
NAMESPACE_PREFIX = "namespace "

_TYPE_KEYWORD = re.compile(r"(?<!\S)(?:class|struct|interface|enum)(?!\S)")

_METHOD_EXCLUDERS = "={;"
_METHOD_TERMINATORS = "{;"


def is_generated_path(path: Path | str) -> bool:
    """Return True for files that are always generated by tooling."""
    return str(path).endswith(GENERATED_FILE_SUFFIXES)


def is_escaped(line: str, index: int) -> bool:
    """Return True if the quote at ``index`` is escaped by a backslash.

    Looks back at most three characters: ``\\"`` is escaped, ``\\\\"`` is not,
    ``\\\\\\"`` is.
    """
    if index <= 0 or line[index - 1] != "\\":
        return False
    if index <= 1 or line[index - 2] != "\\":
        return True
    if index <= 2 or line[index - 3] != "\\":
        return False
    return True


def find_type_keyword(code: str) -> Optional[str]:
    """Return the type keyword declared on ``code``, if any.

    Only the first keyword on the line is considered, and a keyword preceded
    by ``:`` is a generic constraint (``where T : struct``), not a declaration.
    """
    match = _TYPE_KEYWORD.search(code)
    if match is None:
        return None
    before = code[: match.start()].rstrip()
    if before.endswith(":"):
        return None
    return match.group(0)


class CSharpLexer(LineLexer):
    """Classify lines of a ``.cs`` file and collect its type declarations."""

    extensions = (".cs",)
    project_extensions = (".csproj",)

    def __init__(self) -> None:
        super().__init__()
        self.brace_stack: List[Marker] = []
        self.open_class_brace_depth = 0
        self.open_method_line = 0
        self.open_comment_line = 0
        self.open_at_verbatim_quote = False

        self.last_line_was_class = False
        self.last_line_was_method = False
        self.last_line_was_comment = False

        self.method_count = 0
        self.class_comments = 0
        self.method_comments = 0
        self.classes: List[CodeClass] = []
        self.generated = False

        self._current_class: Optional[CodeClass] = None
        self._seen_code = False
        # each declaration is credited with at most one comment
        self._class_credited = False
        self._method_credited = False

    @property
    def brace_depth(self) -> int:
        return len(self.brace_stack)

    # ------------------------------------------------------------------
    # Literal scanning
    # ------------------------------------------------------------------

    def _find_quote_end(self, line: str, index: int) -> int:
        """Return the index of the quote closing the literal opened at ``index``."""
        while True:
            end = line.find('"', index + 1)
            if end < 0:
                if not self.open_at_verbatim_quote:
                    self.add_error("No close quote")
                # verbatim strings legally span lines
                return -1
            if self.open_at_verbatim_quote:
                if end + 1 < len(line) and line[end + 1] == '"':
                    index = end + 1
                    continue
                self.open_at_verbatim_quote = False
            elif is_escaped(line, end):
                index = end
                continue
            return end

    def _find_char_end(self, line: str, index: int) -> int:
        end = line.find("'", index + 1)
        while end >= 0 and is_escaped(line, end):
            end = line.find("'", end + 1)
        return end

    @staticmethod
    def _is_verbatim(line: str, index: int) -> bool:
        # @"..", $@".." and @$".."
        prefix = line[max(index - 2, 0) : index]
        return prefix.endswith("@") or prefix in ("@$", "$@")

    # ------------------------------------------------------------------
    # Comment stripping
    # ------------------------------------------------------------------

    def strip_comments(self, line: str) -> str:
        """Return ``line`` minus any comments, updating spanning state."""
        result = self._line
        code = ""
        while True:
            line = line.strip()
            if not line:
                return code

            if self.open_at_verbatim_quote:
                end = self._find_quote_end(line, -1)
                if end < 0:
                    result.has_code = True
                    return code
                result.has_code = True
                code += line[: end + 1]
                line = line[end + 1 :]

            if self.open_comment_line:
                result.has_comment = True
                end = line.find("*/")
                if end < 0:
                    # whole line inside a multi-line comment
                    result.has_comment_code = True
                    return code
                body = line[:end].strip()
                if self.open_comment_line == self.line_number:
                    result.has_comment_text = result.has_comment_text or bool(body)
                elif body:
                    result.has_comment_code = True
                self.open_comment_line = 0
                line = line[end + 2 :]
                continue

            if line.startswith("//"):
                result.has_comment = True
                result.has_comment_text = result.has_comment_text or len(line) > 2
                return code

            if line.startswith("/*"):
                result.has_comment = True
                self.open_comment_line = self.line_number
                line = line[2:]
                continue

            result.has_code = True
            scanned, rest = self._scan_code(line)
            code += scanned
            if rest is None:
                return code
            line = rest

    def _scan_code(self, line: str) -> Tuple[str, Optional[str]]:
        """Scan code up to a comment.

        Returns the code part and, when a block comment was opened, the text
        following ``/*`` that still needs processing.
        """
        result = self._line
        i = 0
        while i < len(line):
            ch = line[i]

            if ch == '"':
                self.open_at_verbatim_quote = self._is_verbatim(line, i)
                end = self._find_quote_end(line, i)
                if end < 0:
                    break
                i = end + 1
                continue

            if ch == "'":
                end = self._find_char_end(line, i)
                if end < 0:
                    self.add_error("No close of single quote")
                    break
                i = end + 1
                continue

            if ch == "{":
                self.brace_stack.append(Marker(self.line_number, i))
            elif ch == "}":
                if self.open_class_brace_depth == self.brace_depth:
                    # end of the type body
                    self.open_class_brace_depth = 0
                if not self.brace_stack:
                    self.add_error("No close of brace")
                    break
                self.brace_stack.pop()
            elif ch == "/" and i + 1 < len(line):
                following = line[i + 1]
                if following == "/":
                    result.has_comment = True
                    result.has_comment_text = result.has_comment_text or len(line) > i + 2
                    return line[:i].rstrip(), None
                if following == "*":
                    result.has_comment = True
                    self.open_comment_line = self.line_number
                    return line[:i].rstrip(), line[i + 2 :]
            i += 1

        return line, None

    # ------------------------------------------------------------------
    # Line processing
    # ------------------------------------------------------------------

    def _scan(self, raw_line: str) -> None:
        result = self._line
        if not self._seen_code and GENERATED_MARKER in raw_line:
            self.generated = True
            return

        stripped = raw_line.strip()
        if stripped.startswith("#") and not (self.open_comment_line or self.open_at_verbatim_quote):
            # #if, #region, #pragma ...
            result.has_code = True
            self._seen_code = True
            return

        start_depth = self.brace_depth
        code = self.strip_comments(stripped)
        self._seen_code = self._seen_code or result.has_code

        if self.open_method_line:
            # parameters of a method declaration spanning several lines
            end = _find_any(code, _METHOD_TERMINATORS)
            if end < 0:
                result.code = code
                return
            self.open_method_line = 0
            code = code[: end + 1]

        result.code = code
        if not result.is_counted:
            return
        self._attribute_comment()

        if not result.has_code or not code:
            return
        if code.startswith("[") and code.endswith("]"):
            # attribute
            return

        if not code.startswith("{"):
            self.last_line_was_class = False

        if find_type_keyword(code) is not None:
            self._open_class(code, start_depth)

        if not code.startswith("{"):
            self.last_line_was_method = False
            # members start at the type body depth, even when their own body opens here
            if self.open_class_brace_depth == start_depth:
                self._detect_method(code)

        self.last_line_was_comment = False

    def _attribute_comment(self) -> None:
        result = self._line
        if not result.has_comment_text or result.has_code:
            return
        self.last_line_was_comment = True
        if self.last_line_was_class:
            self.last_line_was_class = False
            if not self._class_credited:
                self.class_comments += 1
                self._class_credited = True
        if self.last_line_was_method:
            self.last_line_was_method = False
            if not self._method_credited:
                self.method_comments += 1
                self._method_credited = True

    def _open_class(self, code: str, start_depth: int) -> None:
        record = CodeClass(code)
        if self.open_class_brace_depth == 0:
            self._finish_class()
            self._current_class = record
            self.open_class_brace_depth = start_depth + 1
            if "{" in code and self.brace_depth < self.open_class_brace_depth:
                # whole body on this line: class Empty { }
                self.open_class_brace_depth = 0
                self._finish_class()
        else:
            # nested type, its members are not tracked
            self.classes.append(record)

        self.last_line_was_class = True
        self.type_declarations += 1
        self._line.declarations += 1
        self._class_credited = self.last_line_was_comment
        if self.last_line_was_comment:
            self.class_comments += 1
            self.last_line_was_comment = False

    def _detect_method(self, code: str) -> None:
        paren = code.find("(")
        if paren <= 0:
            return
        if _find_any(code[:paren], _METHOD_EXCLUDERS) >= 0:
            # field initializer or object literal
            return
        if _find_any(code[paren:], _METHOD_TERMINATORS) < 0:
            self.open_method_line = self.line_number

        self.last_line_was_method = True
        self.method_count += 1
        self._line.methods += 1
        if self._current_class is not None:
            self._current_class.methods.append(code)
        self._method_credited = self.last_line_was_comment
        if self.last_line_was_comment:
            self.method_comments += 1
            self.last_line_was_comment = False

    def _finish_class(self) -> None:
        if self._current_class is not None:
            self.classes.append(self._current_class)
            self._current_class = None

    # ------------------------------------------------------------------
    # End of file
    # ------------------------------------------------------------------

    def at_eof(self) -> List[str]:
        if self.open_comment_line:
            self.add_error(f"incomplete comment opened on line {self.open_comment_line}.")
        if self.open_method_line:
            self.add_error(f"incomplete method opened on line {self.open_method_line}.")
        if self.open_at_verbatim_quote:
            self.add_error("incomplete verbatim string at end of file.")
        if self.brace_stack:
            self.add_error(
                f"{self.brace_depth} unmatched braces from line {self.brace_stack[-1].line}."
            )
        self._finish_class()
        return list(self.errors)


def _find_any(text: str, chars: str) -> int:
    for index, ch in enumerate(text):
        if ch in chars:
            return index
    return -1


__all__ = [
    "CSharpLexer",
    "GENERATED_MARKER",
    "NAMESPACE_PREFIX",
    "USING_PREFIX",
    "find_type_keyword",
    "is_escaped",
    "is_generated_path",
]
