"""Tests for the mode and preprocessor stacks."""

from __future__ import annotations

from typing import List, Tuple

from codecounter.lexers.keywords import Keyword, find_keyword
from codecounter.lexers.modes import Mode, ModeStack, PreprocessorStack, Reporter


def _collector() -> Tuple[List[str], Reporter]:
    messages: List[str] = []
    return messages, messages.append


def test_empty_stack_is_global() -> None:
    stack = ModeStack()

    assert stack.is_empty
    assert stack.current_mode is Mode.GLOBAL
    assert stack.current_line == 0
    assert stack.current_offset == 0


def test_push_and_pop_track_counts() -> None:
    messages, report = _collector()
    stack = ModeStack()

    stack.push(Mode.BRACE, 1, 0)
    stack.push(Mode.PARENTH, 1, 4)
    stack.push(Mode.ASM_BRACE, 2, 0)
    assert stack.open_brace_count == 2
    assert stack.open_parenth_count == 1

    assert stack.pop(Mode.ASM_BRACE, report) is Mode.PARENTH
    assert stack.pop(Mode.PARENTH, report) is Mode.BRACE
    assert stack.open_brace_count == 1
    assert stack.open_parenth_count == 0
    assert messages == []


def test_pop_empty_reports_and_returns_global() -> None:
    messages, report = _collector()

    assert ModeStack().pop(Mode.BRACE, report) is Mode.GLOBAL
    assert messages == ["Unmatched BRACE block, mode=GLOBAL"]


def test_pop_wrong_mode_reports_internal_error() -> None:
    messages, report = _collector()
    stack = ModeStack()
    stack.push(Mode.BRACKET, 1, 0)

    assert stack.pop(Mode.PARENTH, report) is Mode.GLOBAL
    assert messages == ["internal error. bad mode PARENTH!=BRACKET"]


def test_push_must_be_later_than_top() -> None:
    messages, report = _collector()
    stack = ModeStack()
    stack.push(Mode.BRACE, 3, 5, report)
    stack.push(Mode.PARENTH, 3, 5, report)

    assert messages == ["internal error. PARENTH opened before BRACE"]


def test_pop_statement_absorbs_nested_statements() -> None:
    messages, report = _collector()
    stack = ModeStack()
    stack.push(Mode.BRACE, 1, 0)
    stack.push(Mode.STATEMENT, 2, 0)
    stack.push(Mode.STATEMENT, 2, 7)
    stack.push(Mode.STATEMENT, 2, 16)

    assert stack.pop_statement(Mode.STATEMENT, report) is Mode.BRACE
    assert len(stack) == 1
    assert messages == []


def test_clone_is_independent_and_inherits_dead() -> None:
    messages, report = _collector()
    original = ModeStack()
    original.push(Mode.BRACE, 1, 0)

    dead = original.clone(4, dead=True)
    dead.push(Mode.PARENTH, 5, 0)
    dead.pop(Mode.PARENTH, report)
    dead.pop(Mode.BRACE, report)

    assert len(original) == 1
    assert original.open_brace_count == 1
    assert original.dead is False
    assert dead.line == 4
    assert dead.clone(6).dead is True
    assert messages == []


def test_preprocessor_stack_round_trip() -> None:
    saved = PreprocessorStack()
    assert not saved
    assert saved.peek() is None
    assert saved.pop() is None

    first, second = ModeStack(), ModeStack(dead=True)
    saved.push(3, first)
    saved.push(9, second)

    assert len(saved) == 2
    assert saved.opened_line == 9
    assert saved.peek() is second
    assert saved.pop() is second
    assert saved.opened_line == 3
    assert saved.pop() is first
    assert saved.opened_line == 0


def test_keyword_lookup_is_exact() -> None:
    assert find_keyword("for") is Keyword.FOR
    assert find_keyword("_asm") is Keyword.ASM
    assert find_keyword("format") is None
    assert find_keyword("For") is None


def test_keyword_properties() -> None:
    assert Keyword.BREAK.takes_arguments is False
    assert Keyword.DEFAULT.takes_arguments is False
    assert Keyword.WHILE.takes_arguments is True
    assert {keyword for keyword in Keyword if keyword.declares_type} == {
        Keyword.STRUCT,
        Keyword.CLASS,
        Keyword.UNION,
        Keyword.ENUM,
    }
    assert [keyword.spelling for keyword in Keyword][:5] == ["default", "break", "continue", "case", "_asm"]
