# lsc/grammar/environment.py
"""Feature matrices and rule environments.

    matrix        := "[" ( ("+"|"-")? name )* "]"
    fancyMatrix   := "[" ( matrixValue | "!" matrixValue | "*" name | "$" name )* "]"
    environment   := before? "_" after?  |  element
    compoundEnv   := ("/" envOrList)? ("//" envOrList)?      -- at least one
    envOrList     := environment | "{" environment ("," environment)* "}"
"""

from __future__ import annotations
from typing import Callable, List, Optional

from ..peg import ParseState, Result, success, failure, memoized
from .ast import (
    Matrix, FeatureValue, NegatedValue, AbsentFeature, FeatureVariable,
    Environment, EnvironmentList, CompoundEnvironment,
)
from . import elements


# ==== matrices ====

def matrix_value(st: ParseState, pos: int) -> Result:
    """matrixValue: ("+" | "-")? name"""
    sign: Optional[str] = None
    cur = pos
    for s in ("+", "-"):
        if st.lit(pos, s).ok:
            sign = s
            cur = pos + 1
            break
    name = st.name(cur)
    if not name.ok:
        return name
    return success(FeatureValue(name.value, sign, span=st.span(pos, name.pos)), name.pos)


def _negated_value(st: ParseState, pos: int) -> Result:
    bang = st.lit(pos, "!")
    if not bang.ok:
        return bang
    value = matrix_value(st, bang.pos)
    if not value.ok:
        return value
    return success(NegatedValue(value.value, span=st.span(pos, value.pos)), value.pos)


def _prefixed_name(prefix: str, node_type) -> Callable[[ParseState, int], Result]:
    def rule(st: ParseState, pos: int) -> Result:
        p = st.lit(pos, prefix)
        if not p.ok:
            return p
        name = st.name(p.pos)
        if not name.ok:
            return name
        return success(node_type(name.value, span=st.span(pos, name.pos)), name.pos)
    return rule


_absent_feature = _prefixed_name("*", AbsentFeature)
_feature_variable = _prefixed_name("$", FeatureVariable)


def fancy_value(st: ParseState, pos: int) -> Result:
    for alt in (matrix_value, _negated_value, _absent_feature, _feature_variable):
        r = alt(st, pos)
        if r.ok:
            return r
    return failure(pos)


def _matrix_body(st: ParseState, pos: int, value_rule) -> Result:
    o = st.lit(pos, "[")
    if not o.ok:
        return o
    values: List = []
    cur = st.skip(o.pos)
    while True:
        v = value_rule(st, cur)
        if not v.ok:
            break
        values.append(v.value)
        cur = st.skip(v.pos)
    c = st.lit(cur, "]")
    if not c.ok:
        return c
    return success(Matrix(tuple(values), span=st.span(pos, c.pos)), c.pos)


def matrix(st: ParseState, pos: int) -> Result:
    """Declarative matrix: signed or bare feature values only."""
    return _matrix_body(st, pos, matrix_value)


def fancy_matrix(st: ParseState, pos: int) -> Result:
    """Pattern matrix: also !value, *absent and $variable."""
    return _matrix_body(st, pos, fancy_value)


# ==== environments ====

def _anchored_environment(st: ParseState, pos: int) -> Result:
    before = elements.unconditional_rule_element(st, pos)
    cur = st.skip_inline(before.pos) if before.ok else pos
    anchor = st.lit(cur, "_")
    if not anchor.ok:
        return anchor
    end = anchor.pos
    after = elements.unconditional_rule_element(st, st.skip_inline(end))
    if after.ok:
        end = after.pos
    return success(Environment(before.value if before.ok else None,
                               after.value if after.ok else None,
                               True, span=st.span(pos, end)), end)


@memoized
def environment(st: ParseState, pos: int) -> Result:
    """environment: before? "_" after? | element"""
    r = _anchored_environment(st, pos)
    if r.ok:
        return r
    elem = elements.unconditional_rule_element(st, pos)
    if not elem.ok:
        return elem
    return success(Environment(elem.value, None, False, span=st.span(pos, elem.pos)), elem.pos)


def environment_list(st: ParseState, pos: int) -> Result:
    """environmentList: "{" environment ("," environment)* "}" """
    o = st.lit(pos, "{")
    if not o.ok:
        return o
    first = environment(st, st.skip(o.pos))
    if not first.ok:
        return first
    items = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip(end), ",")
        if not comma.ok:
            break
        nxt = environment(st, st.skip(comma.pos))
        if not nxt.ok:
            return nxt
        items.append(nxt.value)
        end = nxt.pos
    c = st.lit(st.skip(end), "}")
    if not c.ok:
        return c
    return success(EnvironmentList(tuple(items), span=st.span(pos, c.pos)), c.pos)


def _environment_or_list(st: ParseState, pos: int) -> Result:
    r = environment(st, pos)
    if r.ok:
        return r
    return environment_list(st, pos)


def condition(st: ParseState, pos: int) -> Result:
    """condition: "/" envOrList   (never the first half of "//")"""
    slash = st.lit(pos, "/")
    if not slash.ok:
        return slash
    if st.peek(slash.pos) == "/":
        return failure(pos)
    return _environment_or_list(st, st.skip(slash.pos))


def exclusion(st: ParseState, pos: int) -> Result:
    """exclusion: "//" envOrList"""
    slashes = st.lit(pos, "//")
    if not slashes.ok:
        return slashes
    return _environment_or_list(st, st.skip(slashes.pos))


@memoized
def compound_environment(st: ParseState, pos: int) -> Result:
    """compoundEnvironment: condition? exclusion?  (at least one)"""
    cond = condition(st, pos)
    end = cond.pos if cond.ok else pos
    excl = exclusion(st, st.skip_inline(end) if cond.ok else pos)
    if excl.ok:
        end = excl.pos
    if not cond.ok and not excl.ok:
        return failure(pos)
    return success(CompoundEnvironment(cond.value if cond.ok else None,
                                       excl.value if excl.ok else None,
                                       span=st.span(pos, end)), end)
