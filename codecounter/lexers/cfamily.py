"""Line classifier for C/C++ sources.

The lexer keeps a :class:`ModeStack` describing every open construct (braces,
parentheses, strings, comments, preprocessor lines, ...) and walks each line
character by character in the context of the innermost mode. Conditional
compilation is tracked with a :class:`PreprocessorStack`: every ``#if`` saves
the current stack and continues on a clone, ``#else``/``#elif`` restart from
the saved stack, and ``#endif`` drops the saved copy.

Whether a branch compiles is not evaluated. A fixed table of idioms that are
commonly used to comment code out (``#if 0``, ``#ifdef COMMENT``, ...) marks
a branch as dead; dead lines are not tokenized at all, only ``#`` directives
inside them are.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .base import LineLexer
from .keywords import Keyword, find_keyword
from .modes import Mode, ModeStack, PreprocessorStack

_DIRECTIVE_INCLUDE = "include"
_DIRECTIVE_IF = ("if", "ifdef", "ifndef")
_DIRECTIVE_ELSE = ("elif", "else")
_DIRECTIVE_ENDIF = "endif"

_DIRECTIVES = (_DIRECTIVE_INCLUDE, *_DIRECTIVE_IF, *_DIRECTIVE_ELSE, _DIRECTIVE_ENDIF)

# Conditions known to never compile. Matched literally right after the '#'.
DEAD_BRANCH_CONDITIONS = (
    "if 0",
    "if(0)",
    "if (0)",
    "if defined(COMMENT)",
    "ifdef(0)",
    "ifdef (0)",
    "ifdef COMMENT",
)

_STATEMENT_MODES = frozenset({Mode.GLOBAL, Mode.STATEMENT, Mode.BRACE})
_QUOTE_MODES = frozenset({Mode.CONST_QUOTE, Mode.CONST_CHAR})

_OPENERS = {
    "'": Mode.CONST_CHAR,
    "{": Mode.BRACE,
    "(": Mode.PARENTH,
    "[": Mode.BRACKET,
}


def is_name_char(ch: str) -> bool:
    """Return True for characters that may start a symbol name."""
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def find_in(text: str, index: int, table: Sequence[str]) -> Optional[str]:
    """Return the first entry of ``table`` spelled at ``index`` as a whole word."""
    for entry in table:
        if not text.startswith(entry, index):
            continue
        end = index + len(entry)
        if end >= len(text) or not is_name_char(text[end]):
            return entry
    return None


class CFamilyLexer(LineLexer):
    """Classify lines of a ``.cpp`` file and track its nesting."""

    extensions = (".cpp",)
    project_extensions = (".vcxproj",)

    def __init__(self) -> None:
        super().__init__()
        self.modes = ModeStack()
        self.preprocessor = PreprocessorStack()
        self._text = ""
        self._indent = 0

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _is_line_end(self, index: int) -> bool:
        if index < 0 or index >= len(self._text):
            return True
        return self._text[index] in "\r\n"

    def _char(self, index: int) -> str:
        if self._is_line_end(index):
            return "\0"
        return self._text[index]

    def _skip_whitespace(self, index: int) -> int:
        text = self._text
        while index < len(text) and text[index].isspace():
            index += 1
        return index

    def _name_end(self, index: int) -> int:
        text = self._text
        end = index
        while end < len(text):
            ch = text[end]
            if is_name_char(ch) or (ch.isdigit() and end != index):
                end += 1
                continue
            break
        return end

    def _is_label_end(self, index: int) -> bool:
        # a single ':' (not '::')
        return self._char(index) == ":" and self._char(index + 1) != ":"

    def _push(self, mode: Mode, offset: int) -> None:
        self.modes.push(mode, self.line_number, offset, self.add_error)

    def _pop(self, mode: Mode) -> Mode:
        return self.modes.pop(mode, self.add_error)

    def _pop_statement(self, mode: Mode) -> Mode:
        return self.modes.pop_statement(mode, self.add_error)

    # ------------------------------------------------------------------
    # Line processing
    # ------------------------------------------------------------------

    def _scan(self, raw_line: str) -> None:
        if not raw_line.strip():
            return

        self._text = raw_line
        line = self._line
        text = raw_line
        start_mode = self.modes.current_mode
        leading_whitespace = 0
        blank = True
        self._indent = 0

        i = 0
        while i < len(text):
            ch = text[i]

            if ch.isspace():
                if ch in "\r\n":
                    break
                if blank:
                    leading_whitespace += 1
                i += 1
                continue

            mode = self.modes.current_mode
            if blank:
                if self.modes.dead and ch != "#":
                    # code that never compiles
                    line.has_comment = True
                    line.has_comment_code = True
                    break
                blank = False
                self._indent = self._indent_for(mode, ch)

            if mode in _STATEMENT_MODES:
                if mode is Mode.STATEMENT and ch == ";":
                    line.has_code = True
                    self._pop_statement(mode)
                    i += 1
                    continue
                if mode is Mode.STATEMENT and ch in "})":
                    # data definitions may end without ';': x = { ... }; f( a )
                    line.has_code = True
                    mode = self._pop_statement(mode)
                    if mode not in (Mode.BRACE, Mode.PARENTH):
                        self.add_error(f"unmatched ending '{ch}' block (no opening) at offset {i}")
                        return
                    self._pop_statement(mode)
                    i += 1
                    continue
                if mode is Mode.BRACE and ch == "}":
                    line.has_code = True
                    self._pop_statement(mode)
                    i += 1
                    continue
                next_index = self._scan_statement(i, mode, leading_whitespace)
                if next_index is not None:
                    i = next_index
                    continue

            elif mode is Mode.ASM:
                if ch != "/":
                    line.has_code = True
                    self._pop(mode)
                    self._push(Mode.ASM_BRACE if ch == "{" else Mode.ASM_CMD, i)
                    i += 1
                    continue

            elif mode in (Mode.ASM_CMD, Mode.ASM_BRACE):
                if mode is Mode.ASM_BRACE and ch == "}":
                    line.has_code = True
                    self._pop(mode)
                    i += 1
                    continue
                if ch != "/":
                    if ch == ";":
                        # assembler comment
                        self._push(Mode.LINE_COMMENT, i)
                    else:
                        line.has_code = True
                    i += 1
                    continue

            elif mode is Mode.PARENTH or mode is Mode.BRACKET:
                if ch == mode.token:
                    line.has_code = True
                    self._pop(mode)
                    i += 1
                    continue

            elif mode is Mode.COMMENT:
                line.has_comment = True
                if ch == "*" and self._char(i + 1) == "/":
                    self._pop(mode)
                    i += 2
                    continue
                line.has_comment_text = True
                i += 1
                continue

            elif mode in _QUOTE_MODES:
                if ch == "\\":
                    if self._is_line_end(i + 1):
                        # continues on the next line
                        i += 1
                        break
                    line.has_code = True
                    i += 2
                    continue
                line.has_code = True
                if ch == mode.token:
                    self._pop(mode)
                i += 1
                continue

            elif mode is Mode.CONST_QUOTE_RAW:
                line.has_code = True
                if ch == '"' and self._char(i - 1) == ")":
                    self._pop(mode)
                i += 1
                continue

            elif mode is Mode.LINE_COMMENT:
                line.has_comment = True
                line.has_comment_text = True
                i += 1
                continue

            elif mode is Mode.PREPROCESS:
                if ch != "/":
                    if ch == "\\" and self._is_line_end(i + 1):
                        i += 1
                        break
                    line.has_code = True
                    i += 1
                    continue

            next_index = self._scan_token(i, leading_whitespace)
            if next_index is None:
                return
            i = next_index

        self._end_of_line(i, start_mode)
        line.indent = max(self._indent, 0)

    def _indent_for(self, mode: Mode, ch: str) -> int:
        indent = self.modes.open_brace_count
        if mode in (Mode.STATEMENT, Mode.ASM):
            if ch != "{":
                indent += 1
        elif mode in (Mode.PARENTH, Mode.BRACKET):
            indent += 1
        elif mode in (Mode.ASM_BRACE, Mode.BRACE):
            if ch == "}":
                indent -= 1
        return indent

    def _scan_statement(self, i: int, mode: Mode, leading_whitespace: int) -> Optional[int]:
        """Consume a name or keyword at ``i``; None when there is no name here."""
        end = self._name_end(i)
        if end <= i:
            return None

        self._line.has_code = True

        start = i
        # __asm is spelled with any number of leading underscores
        while self._char(start) == "_" and self._char(start + 1) == "_":
            start += 1

        keyword = find_keyword(self._text[start:end])
        next_index = self._skip_whitespace(end)

        if keyword is None:
            if mode is not Mode.GLOBAL and self._is_label_end(next_index):
                self._outdent_label(i, leading_whitespace)
            elif mode is not Mode.STATEMENT:
                # a declaration or call, must be followed by ';'
                self._push(Mode.STATEMENT, i)
        elif not keyword.takes_arguments:
            pass
        elif keyword is Keyword.CASE:
            self._outdent_label(i, leading_whitespace)
        elif keyword is Keyword.ASM:
            self._push(Mode.ASM, i)
        elif keyword.declares_type:
            # also counts the inner keyword of "enum class X" and "template <class T>"
            self.type_declarations += 1
            self._line.declarations += 1
            self._push(Mode.STATEMENT, i)
        else:
            self._push(Mode.STATEMENT, i)

        return next_index

    def _outdent_label(self, i: int, leading_whitespace: int) -> None:
        if leading_whitespace == i:
            self._indent -= 1

    def _scan_token(self, i: int, leading_whitespace: int) -> Optional[int]:
        """Handle punctuation at ``i``; None aborts the rest of the line."""
        line = self._line
        ch = self._text[i]

        if ch == '"':
            line.has_code = True
            if self._char(i - 1) == "R" and self._char(i + 1) == "(":
                i += 1
                self._push(Mode.CONST_QUOTE_RAW, i)
            else:
                self._push(Mode.CONST_QUOTE, i)
            return i + 1

        if ch in _OPENERS:
            line.has_code = True
            self._push(_OPENERS[ch], i)
            return i + 1

        if ch in "})]":
            self.add_error(f"unmatched '{ch}', looking for '{self.modes.current_mode.token}'")
            return None

        if ch == "/":
            following = self._char(i + 1)
            if following == "/":
                if self.modes.current_mode is Mode.PREPROCESS:
                    self._pop(Mode.PREPROCESS)
                line.has_comment = True
                self._push(Mode.LINE_COMMENT, i + 1)
                return i + 2
            if following == "*":
                line.has_comment = True
                self._push(Mode.COMMENT, i + 1)
                return i + 2
            return i + 1

        if ch == "#" and leading_whitespace == i:
            return self._scan_directive(i)

        return i + 1

    def _scan_directive(self, i: int) -> Optional[int]:
        line = self._line
        line.has_code = True
        self._indent = 0

        directive = find_in(self._text, i + 1, _DIRECTIVES)
        if directive in _DIRECTIVE_IF:
            self.preprocessor.push(self.line_number, self.modes)
            dead = find_in(self._text, i + 1, DEAD_BRANCH_CONDITIONS) is not None
            self.modes = self.modes.clone(self.line_number, dead)
            line.has_comment_code = line.has_comment_code or self.modes.dead
        elif directive in _DIRECTIVE_ELSE:
            saved = self.preprocessor.peek()
            if saved is None:
                self.add_error(f"Mismatched #{directive}")
                return None
            # restart from the state the matching #if saw
            self.modes = saved.clone(self.line_number)
        elif directive == _DIRECTIVE_ENDIF:
            saved = self.preprocessor.pop()
            if saved is None:
                self.add_error("Mismatched #endif")
                return None
            if self.modes.dead:
                self.modes = saved

        offset = i + len(directive) if directive else i
        self._push(Mode.PREPROCESS, offset)
        return offset + 1

    def _end_of_line(self, i: int, start_mode: Mode) -> None:
        mode = self.modes.current_mode
        continued = self._char(i - 1) == "\\"

        if mode in _QUOTE_MODES:
            if not continued:
                self.add_error("new line in constant")
                self._pop(mode)
        elif mode is Mode.ASM_CMD:
            if not continued:
                self._pop_statement(mode)
        elif mode is Mode.LINE_COMMENT:
            self._pop(mode)
        elif mode is Mode.PREPROCESS:
            self._indent = 1 if start_mode is Mode.PREPROCESS else 0
            if not continued:
                self._pop(mode)

    # ------------------------------------------------------------------
    # End of file
    # ------------------------------------------------------------------

    def at_eof(self) -> List[str]:
        if not self.modes.is_empty:
            mode = self.modes.current_mode
            self.add_error(
                f"Unclosed {mode.name} block type '{mode.token}' opened on line {self.modes.current_line}"
            )
        if self.preprocessor:
            self.add_error(
                f"Unclosed preprocessor block opened on line {self.preprocessor.opened_line}"
            )
        return list(self.errors)


__all__ = ["CFamilyLexer", "DEAD_BRANCH_CONDITIONS", "find_in", "is_name_char"]
