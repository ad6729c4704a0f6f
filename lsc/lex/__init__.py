# lsc/lex/__init__.py
"""LSC scanner primitives.

The scanner never fails on its own: every `match_*` method returns the end
offset of the token it recognised at `pos`, or None when there is nothing to
recognise there. Reporting the miss is the grammar's job.

Tokens
------
- name   : one or more ASCII letters/digits
- number : one or more digits
- text   : one or more characters outside the reserved set, or a
           backslash-escaped arbitrary character
- separation : whitespace, line breaks and `#` comments
- inline whitespace : spaces and tabs only
"""

from __future__ import annotations
import bisect
from dataclasses import dataclass
from typing import List, Optional, Tuple

import regex as re

# Characters that can never appear unescaped inside a text token.
RESERVED = ",.=>()*[]{}+?/-_:!~$@#&\n\r "

_NAME_RE = re.compile(r"[A-Za-z0-9]+")
_NUMBER_RE = re.compile(r"[0-9]+")
_TEXT_RE = re.compile(r"(?:\\.|[^,.=>()*\[\]{}+?/\-_:!~$@#&\n\r \\])+", re.S)
_ESCAPE_RE = re.compile(r"\\(.)", re.S)
_INLINE_WS_RE = re.compile(r"[ \t]+")
_SEPARATION_RE = re.compile(r"(?:[ \t\f\r\n]+|#[^\r\n]*)+")
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    line: int
    col: int


def normalize_newlines(text: str) -> str:
    """CRLF and lone CR become LF; offsets then count one character per line break."""
    return _NEWLINE_RE.sub("\n", text)


def unescape_text(raw: str) -> str:
    """`\\,` -> `,` (the escape only lifts the character out of the reserved set)"""
    return _ESCAPE_RE.sub(lambda m: m.group(1), raw)


def _keyword_spellings(word: str) -> Tuple[str, ...]:
    """The word as written and with its first letter's case flipped."""
    for i, ch in enumerate(word):
        if ch.isalpha():
            flipped = word[:i] + ch.swapcase() + word[i + 1:]
            return (word, flipped)
    return (word,)


class Scanner:
    """Position-tracked primitives over one immutable source buffer."""

    def __init__(self, src: str):
        self.src = src
        self.n = len(src)
        self._line_starts: List[int] = [0] + [m.end() for m in _NEWLINE_RE.finditer(src)]

    # ---- positions ----

    def at_end(self, pos: int) -> bool:
        return pos >= self.n

    def peek(self, pos: int) -> Optional[str]:
        if pos >= self.n:
            return None
        return self.src[pos]

    def line_col(self, pos: int) -> Tuple[int, int]:
        """1-based (line, column) of an absolute offset."""
        idx = bisect.bisect_right(self._line_starts, pos) - 1
        return idx + 1, pos - self._line_starts[idx] + 1

    def span(self, start: int, end: int) -> Span:
        line, col = self.line_col(start)
        return Span(start, end, line, col)

    def line_bounds(self, pos: int) -> Tuple[int, int]:
        """[start, end) of the line holding pos."""
        start = self.src.rfind("\n", 0, pos)
        start = 0 if start < 0 else start + 1
        end = self.src.find("\n", pos)
        end = self.n if end < 0 else end
        return start, end

    # ---- skipping ----

    def skip(self, pos: int) -> int:
        """Whitespace, line breaks and comments."""
        m = _SEPARATION_RE.match(self.src, pos)
        return m.end() if m else pos

    def skip_inline(self, pos: int) -> int:
        """Spaces and tabs; never crosses a line break."""
        m = _INLINE_WS_RE.match(self.src, pos)
        return m.end() if m else pos

    def has_line_break(self, start: int, end: int) -> bool:
        return "\n" in self.src[start:end] or "\r" in self.src[start:end]

    # ---- tokens ----

    def match_literal(self, pos: int, lit: str) -> Optional[int]:
        if self.src.startswith(lit, pos):
            return pos + len(lit)
        return None

    def match_keyword(self, pos: int, *words: str) -> Optional[int]:
        """Case-insensitive in the first letter; alphabetic keywords need a word boundary."""
        for word in words:
            for spelling in _keyword_spellings(word):
                if not self.src.startswith(spelling, pos):
                    continue
                end = pos + len(spelling)
                if spelling[-1].isalnum() and _NAME_RE.match(self.src, end):
                    continue
                return end
        return None

    def match_name(self, pos: int) -> Optional[int]:
        m = _NAME_RE.match(self.src, pos)
        return m.end() if m else None

    def match_number(self, pos: int) -> Optional[int]:
        m = _NUMBER_RE.match(self.src, pos)
        return m.end() if m else None

    def match_text(self, pos: int) -> Optional[int]:
        m = _TEXT_RE.match(self.src, pos)
        return m.end() if m else None
