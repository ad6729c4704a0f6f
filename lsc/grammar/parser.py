# lsc/grammar/parser.py
"""LSC file parser.

- `parse_lsc(src)`: whole rule file -> list of statements
- `parse_rule(rule, src)`: `src` parsed completely as one named grammar rule
- the statement dispatcher tries the declaration forms in a fixed order;
  the first one that matches wins
"""

from __future__ import annotations
from typing import Callable, Dict, List

from ..peg import ParseState, ParseError, Result, success, failure
from .ast import Statement
from . import declarations as decl
from . import elements
from . import environment

# Order matters: `Romanizer-x` before `Romanizer`, and change rules before
# standard expressions (a bare `name` line followed by a block is a rule).
_STATEMENT_FORMS = (
    decl.feature_decl,
    decl.diacritic_decl,
    decl.symbol_decl,
    decl.class_decl,
    decl.element_decl,
    decl.syllable_decl,
    decl.deromanizer,
    decl.inter_romanizer,
    decl.romanizer,
    decl.change_rule,
    decl.standard_expression,
)


def statement(st: ParseState, pos: int) -> Result:
    """Value is a tuple: `Feature a, b` declares one statement per feature."""
    for form in _STATEMENT_FORMS:
        r = form(st, pos)
        if r.ok:
            value = r.value if isinstance(r.value, tuple) else (r.value,)
            return success(value, r.pos)
    return failure(pos)


def lsc_file(st: ParseState, pos: int) -> Result:
    out: List[Statement] = []
    cur = st.skip(pos)
    while not st.at_end(cur):
        r = statement(st, cur)
        if not r.ok:
            return st.expect(cur, "end of input")
        out.extend(r.value)
        cur = st.skip(r.pos)
    return success(out, cur)


RULES: Dict[str, Callable[[ParseState, int], Result]] = {
    "file": lsc_file,
    "statement": statement,
    "feature_decl": decl.feature_decl,
    "plus_feature": decl.plus_feature,
    "diacritic_decl": decl.diacritic_decl,
    "symbol_decl": decl.symbol_decl,
    "class_decl": decl.class_decl,
    "element_decl": decl.element_decl,
    "syllable_decl": decl.syllable_decl,
    "syllable_expression": decl.syllable_expression,
    "deromanizer": decl.deromanizer,
    "romanizer": decl.romanizer,
    "inter_romanizer": decl.inter_romanizer,
    "change_rule": decl.change_rule,
    "block": decl.block,
    "expression": decl.expression,
    "standard_expression": decl.standard_expression,
    "rule_element": elements.rule_element,
    "unconditional_rule_element": elements.unconditional_rule_element,
    "free_element": elements.free_element,
    "interfix_element": elements.interfix_element,
    "bounded": elements.bounded,
    "simple": elements.simple,
    "matrix": environment.matrix,
    "fancy_matrix": environment.fancy_matrix,
    "environment": environment.environment,
    "compound_environment": environment.compound_environment,
}


def _too_deep(st: ParseState) -> ParseError:
    pos = st.furthest
    line, col = st.line_col(pos)
    return ParseError(pos, line, col, ("shallower nesting",), st.caret_snippet(pos))


def parse_rule(rule: str, src: str):
    """Parse all of `src` as `rule`; raises KeyError for an unknown rule name."""
    fn = RULES[rule]
    st = ParseState(src)
    try:
        r = fn(st, 0)
    except RecursionError:
        raise _too_deep(st) from None
    if r.ok and st.at_end(r.pos):
        return r.value
    if r.ok:
        st.expect(r.pos, "end of input")
    raise st.error()


def parse_lsc(src: str) -> List[Statement]:
    """Parse a whole LSC rule file. Raises ParseError; never returns a partial list."""
    return parse_rule("file", src)


__all__ = ["parse_lsc", "parse_rule", "RULES", "ParseError"]
