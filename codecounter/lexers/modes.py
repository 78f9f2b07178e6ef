"""Lexical modes and the nesting stacks used by the C-family lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

Reporter = Callable[[str], None]


class Mode(Enum):
    """Lexical context of the C-family lexer.

    The value is ``(closing token, description)``.
    """

    GLOBAL = (".", "global code space (default)")
    STATEMENT = (";", "for() if() switch() - must have following statement")

    ASM = (";", "_asm block or command")
    ASM_CMD = (";", "single _asm command, no ; required")
    ASM_BRACE = ("}", "_asm { } block, contents ignored")

    BRACE = ("}", "inside at least one set of braces")
    PARENTH = (")", "inside at least one set of parentheses")
    BRACKET = ("]", "inside at least one set of brackets")

    COMMENT = ("/", "block comment, interrupts other modes")
    LINE_COMMENT = ("/", "comment to the end of the line")
    PREPROCESS = ("#", "#define or #if takes the whole line (can continue)")

    CONST_QUOTE = ('"', "string literal")
    CONST_CHAR = ("'", "character literal")
    CONST_QUOTE_RAW = ('"', 'raw string literal R"(...)"')

    @property
    def token(self) -> str:
        return self.value[0]


_BRACE_MODES = frozenset({Mode.BRACE, Mode.ASM_BRACE})


@dataclass(frozen=True)
class ModeMarker:
    """A mode opened at a given 1-based line and 0-based offset."""

    mode: Mode
    line: int
    offset: int


class ModeStack:
    """Stack of open modes; :attr:`Mode.GLOBAL` is implied when empty.

    ``line`` is the line of the preprocessor directive that produced this
    stack (0 for the file-level stack) and ``dead`` marks a branch that is
    known not to compile.
    """

    def __init__(
        self,
        line: int = 0,
        dead: bool = False,
        markers: Iterable[ModeMarker] = (),
        open_brace_count: int = 0,
        open_parenth_count: int = 0,
    ) -> None:
        self.line = line
        self.dead = dead
        self._markers: List[ModeMarker] = list(markers)
        self.open_brace_count = open_brace_count
        self.open_parenth_count = open_parenth_count

    def clone(self, line: int, dead: bool = False) -> "ModeStack":
        """Return an independent copy for a new preprocessor branch."""
        return ModeStack(
            line=line,
            dead=self.dead or dead,
            markers=self._markers,
            open_brace_count=self.open_brace_count,
            open_parenth_count=self.open_parenth_count,
        )

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[ModeMarker]:
        return iter(self._markers)

    @property
    def is_empty(self) -> bool:
        return not self._markers

    @property
    def top(self) -> Optional[ModeMarker]:
        return self._markers[-1] if self._markers else None

    @property
    def current_mode(self) -> Mode:
        return self._markers[-1].mode if self._markers else Mode.GLOBAL

    @property
    def current_line(self) -> int:
        return self._markers[-1].line if self._markers else 0

    @property
    def current_offset(self) -> int:
        return self._markers[-1].offset if self._markers else 0

    def push(self, mode: Mode, line: int, offset: int, report: Reporter | None = None) -> Mode:
        top = self.top
        if top is not None and (line, offset) <= (top.line, top.offset) and report is not None:
            report(f"internal error. {mode.name} opened before {top.mode.name}")
        if mode in _BRACE_MODES:
            self.open_brace_count += 1
        elif mode is Mode.PARENTH:
            self.open_parenth_count += 1
        self._markers.append(ModeMarker(mode, line, offset))
        return mode

    def pop(self, expected: Mode, report: Reporter) -> Mode:
        """Pop ``expected`` and return the mode now on top."""
        if expected in _BRACE_MODES:
            self.open_brace_count -= 1
        elif expected is Mode.PARENTH:
            self.open_parenth_count -= 1
        if not self._markers:
            report(f"Unmatched {expected.name} block, mode={self.current_mode.name}")
            return Mode.GLOBAL
        if expected is not self.current_mode:
            report(f"internal error. bad mode {expected.name}!={self.current_mode.name}")
        self._markers.pop()
        return self.current_mode

    def pop_statement(self, expected: Mode, report: Reporter) -> Mode:
        """Pop ``expected`` and every STATEMENT it exposes (``if (x) for (;;) f();``)."""
        mode = self.pop(expected, report)
        while mode is Mode.STATEMENT:
            mode = self.pop(mode, report)
        return mode


class PreprocessorStack:
    """Saved mode stacks, one per open ``#if``/``#ifdef``/``#ifndef``.

    Each entry pairs the line of the opening directive with the mode stack
    as it was just before that directive.
    """

    def __init__(self) -> None:
        self._saved: List[Tuple[int, ModeStack]] = []

    def __len__(self) -> int:
        return len(self._saved)

    def __bool__(self) -> bool:
        return bool(self._saved)

    def push(self, line: int, stack: ModeStack) -> None:
        self._saved.append((line, stack))

    def peek(self) -> Optional[ModeStack]:
        return self._saved[-1][1] if self._saved else None

    def pop(self) -> Optional[ModeStack]:
        return self._saved.pop()[1] if self._saved else None

    @property
    def opened_line(self) -> int:
        """Line of the innermost open directive (0 when none)."""
        return self._saved[-1][0] if self._saved else 0


__all__ = ["Mode", "ModeMarker", "ModeStack", "PreprocessorStack", "Reporter"]
