# lsc/peg/runtime.py
"""Ordered-choice runtime shared by every LSC grammar rule.

Rules are plain functions `rule(st, pos) -> Result`. A rule either succeeds
with a value and the position after it, or fails at a position; backtracking
is just calling the next alternative with the same `pos`. Nothing here uses
exceptions for expected failures: `ParseError` is raised once, by the entry
point, after every alternative has been exhausted.
"""

from __future__ import annotations
import functools
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, NamedTuple, Set, Tuple

from ..lex import Scanner


class Result(NamedTuple):
    ok: bool
    pos: int
    value: Any = None


def success(value: Any, pos: int) -> Result:
    return Result(True, pos, value)


def failure(pos: int) -> Result:
    return Result(False, pos)


class ParseError(SyntaxError):
    """The only error the parser raises.

    Carries the furthest position any alternative reached, and the set of
    things that would have been accepted there.
    """

    def __init__(self, position: int, line: int, column: int,
                 expected: Tuple[str, ...], snippet: str = ""):
        self.position = position
        self.line = line
        self.column = column
        self.expected = expected
        self.snippet = snippet
        wanted = ", ".join(expected) if expected else "nothing"
        msg = f"Parse error at {line}:{column}: expected one of {{{wanted}}}"
        if snippet:
            msg = f"{msg}\n{snippet}"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.msg


class ParseState(Scanner):
    """Scanner + packrat memo + furthest-failure bookkeeping for one parse."""

    def __init__(self, src: str):
        super().__init__(src)
        # (rule_name, pos, quiet) -> Result
        self.memo: Dict[Tuple[str, int, bool], Result] = {}
        self.furthest = 0
        self.expected: Set[str] = set()
        self._quiet = 0

    # ---- failure tracking ----

    def expect(self, pos: int, label: str) -> Result:
        """Record that `label` was wanted at `pos`, and fail there."""
        if not self._quiet:
            if pos > self.furthest:
                self.furthest = pos
                self.expected = {label}
            elif pos == self.furthest:
                self.expected.add(label)
        return failure(pos)

    @contextmanager
    def quiet(self) -> Iterator[None]:
        """Look-ahead: misses inside are not reported."""
        self._quiet += 1
        try:
            yield
        finally:
            self._quiet -= 1

    def error(self) -> ParseError:
        pos = self.furthest
        line, col = self.line_col(pos)
        return ParseError(pos, line, col, tuple(sorted(self.expected)), self.caret_snippet(pos))

    def caret_snippet(self, pos: int) -> str:
        start, end = self.line_bounds(pos)
        caret = " " * (pos - start) + "^"
        return f"{self.src[start:end]}\n{caret}"

    # ---- reporting token matchers ----

    def lit(self, pos: int, lit: str) -> Result:
        end = self.match_literal(pos, lit)
        if end is None:
            return self.expect(pos, repr(lit))
        return success(lit, end)

    def keyword(self, pos: int, *words: str) -> Result:
        """Value is the canonical (lower-case) keyword."""
        end = self.match_keyword(pos, *words)
        if end is None:
            for word in words:
                self.expect(pos, repr(word))
            return failure(pos)
        return success(words[0].lower(), end)

    def name(self, pos: int) -> Result:
        end = self.match_name(pos)
        if end is None:
            return self.expect(pos, "name")
        return success(self.src[pos:end], end)

    def number(self, pos: int) -> Result:
        end = self.match_number(pos)
        if end is None:
            return self.expect(pos, "number")
        return success(int(self.src[pos:end]), end)

    def raw_text(self, pos: int) -> Result:
        end = self.match_text(pos)
        if end is None:
            return self.expect(pos, "text")
        return success(self.src[pos:end], end)


Rule = Callable[[ParseState, int], Result]


def memoized(fn: Rule) -> Rule:
    """Packrat memo on (rule, pos).

    A rule re-entered at the same position before it finished fails, the
    usual PEG treatment of left recursion. Quiet look-ahead keeps its own
    entries: a result stored there recorded no expectations.
    """
    key_name = fn.__module__ + "." + fn.__name__

    @functools.wraps(fn)
    def apply(st: ParseState, pos: int) -> Result:
        key = (key_name, pos, st._quiet > 0)
        hit = st.memo.get(key)
        if hit is not None:
            return hit
        st.memo[key] = failure(pos)
        res = fn(st, pos)
        st.memo[key] = res
        return res

    return apply
