"""C/C++ keywords that expect trailing syntax."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Keyword(Enum):
    """Keywords recognised by the C-family lexer, in lookup order.

    The value is ``(spelling, example)``.
    """

    # no arguments
    DEFAULT = ("default", "default: // in switch")
    BREAK = ("break", "break; // in switch or for, while")
    CONTINUE = ("continue", "continue;")

    CASE = ("case", "case x: // label in switch")
    ASM = ("_asm", "_asm x or _asm { }")

    # must have arguments
    FOR = ("for", "for (;;) {;}")
    IF = ("if", "if (x) {;}")
    SWITCH = ("switch", "switch (x) { case: default: ;}")
    WHILE = ("while", "while (x) {;}")
    ELSE = ("else", "else [if] {;}")
    DO = ("do", "do {;} while (x);")
    STRUCT = ("struct", "struct x {} ;")
    CLASS = ("class", "class x {} ;")
    UNION = ("union", "union x {} ;")
    ENUM = ("enum", "enum x {,} ;")
    RETURN = ("return", "return(;);")
    SIZEOF = ("sizeof", "sizeof(x) ;")
    GOTO = ("goto", "goto x;")
    TYPEDEF = ("typedef", "typedef xtype x;")

    @property
    def spelling(self) -> str:
        return self.value[0]

    @property
    def takes_arguments(self) -> bool:
        return self not in _NO_ARGUMENTS

    @property
    def declares_type(self) -> bool:
        return self in _TYPE_DECLARATIONS


_NO_ARGUMENTS = frozenset({Keyword.DEFAULT, Keyword.BREAK, Keyword.CONTINUE})
_TYPE_DECLARATIONS = frozenset({Keyword.STRUCT, Keyword.CLASS, Keyword.UNION, Keyword.ENUM})
_BY_SPELLING = {keyword.spelling: keyword for keyword in Keyword}


def find_keyword(name: str) -> Optional[Keyword]:
    """Return the keyword spelled exactly ``name``, or None."""
    return _BY_SPELLING.get(name)


__all__ = ["Keyword", "find_keyword"]
