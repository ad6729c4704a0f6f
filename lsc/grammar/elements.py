# lsc/grammar/elements.py
"""Pattern-expression grammar (rule elements).

Precedence, tightest first:

    simple / bounded        <Syl> @name $1 [..] * . $ $$ text | (e) {e, e}
    negated                 "!" (bounded | simple)
    postfix                 (bounded | negated | simple) $N
                            (bounded | simple) (+ | * | ? | *N | *(lo-hi))
    interfix                operand (("&!" | "&" | ">") operand)+   -- no whitespace
    sequence                free (INLINE_WS free)+                  -- loosest

Each tier parses the tighter tier first and then tries to extend it, so a
lone operand falls through unchanged (no one-element Interfix or Sequence).
"""

from __future__ import annotations
from typing import List

from ..lex import unescape_text
from ..peg import ParseState, Result, success, failure, memoized
from .ast import (
    RepeatKind, InterfixOp,
    Group, ElementList, Sequence, Interfix, Negated, Capture, Repeat,
    ConditionalElement, AnySyllable, ElementRef, CaptureRef, Empty,
    SyllableBoundary, WordBoundary, BetweenWords, Text,
)
from . import environment


# ---- conditional / unconditional ----

@memoized
def rule_element(st: ParseState, pos: int) -> Result:
    """ruleElement: unconditionalRuleElement compoundEnvironment?"""
    elem = unconditional_rule_element(st, pos)
    if not elem.ok:
        return elem
    env = environment.compound_environment(st, st.skip_inline(elem.pos))
    if not env.ok:
        return elem
    return success(ConditionalElement(elem.value, env.value, span=st.span(pos, env.pos)), env.pos)


@memoized
def unconditional_rule_element(st: ParseState, pos: int) -> Result:
    return sequence(st, pos)


def sequence(st: ParseState, pos: int) -> Result:
    """sequence: free (INLINE_WS free)*  -- one member stands for itself"""
    first = free_element(st, pos)
    if not first.ok:
        return first
    items: List = [first.value]
    end = first.pos
    while True:
        gap = st.skip_inline(end)
        if gap == end:
            break
        nxt = free_element(st, gap)
        if not nxt.ok:
            break
        items.append(nxt.value)
        end = nxt.pos
    if len(items) == 1:
        return first
    return success(Sequence(tuple(items), span=st.span(pos, end)), end)


# ---- interfix ----

def _interfix_operator(st: ParseState, pos: int) -> Result:
    for op in InterfixOp.ALL:
        r = st.lit(pos, op)
        if r.ok:
            return r
    return failure(pos)


@memoized
def free_element(st: ParseState, pos: int) -> Result:
    """freeElement: interfixElement (interfixOp interfixElement)*"""
    first = interfix_element(st, pos)
    if not first.ok:
        return first
    operands = [first.value]
    operators: List[str] = []
    end = first.pos
    while True:
        op = _interfix_operator(st, end)
        if not op.ok:
            break
        rhs = interfix_element(st, op.pos)
        if not rhs.ok:
            break
        operators.append(op.value)
        operands.append(rhs.value)
        end = rhs.pos
    if not operators:
        return first
    return success(Interfix(tuple(operands), tuple(operators), span=st.span(pos, end)), end)


# ---- postfix / prefix ----

@memoized
def interfix_element(st: ParseState, pos: int) -> Result:
    """interfixElement: postfix | negated | bounded | simple"""
    base = bounded(st, pos)
    if not base.ok:
        base = negated(st, pos)
    if not base.ok:
        base = simple(st, pos)
    if not base.ok:
        return base

    node = base.value
    cap = capture_ref(st, base.pos)
    if cap.ok:
        ref = cap.value
        return success(Capture(node, ref.index, ref.inexact, ref.syllable,
                               span=st.span(pos, cap.pos)), cap.pos)
    if isinstance(node, Negated):
        return base
    rep = repeater(st, base.pos)
    if rep.ok:
        kind, lo, hi = rep.value
        return success(Repeat(node, kind, lo, hi, span=st.span(pos, rep.pos)), rep.pos)
    return base


def negated(st: ParseState, pos: int) -> Result:
    """negated: "!" (bounded | simple)"""
    bang = st.lit(pos, "!")
    if not bang.ok:
        return bang
    inner = bounded(st, bang.pos)
    if not inner.ok:
        inner = simple(st, bang.pos)
    if not inner.ok:
        return inner
    return success(Negated(inner.value, span=st.span(pos, inner.pos)), inner.pos)


def repeater(st: ParseState, pos: int) -> Result:
    """Value: (RepeatKind, minimum, maximum)."""
    r = _repeat_range(st, pos)
    if r.ok:
        return r
    if st.lit(pos, "+").ok:
        return success((RepeatKind.ONE_OR_MORE, 1, None), pos + 1)
    if st.lit(pos, "*").ok:
        return success((RepeatKind.ZERO_OR_MORE, 0, None), pos + 1)
    if st.lit(pos, "?").ok and st.peek(pos + 1) != ":":
        return success((RepeatKind.OPTIONAL, 0, 1), pos + 1)
    return failure(pos)


def _repeat_range(st: ParseState, pos: int) -> Result:
    """"*" NUMBER | "*" "(" NUMBER? "-" NUMBER? ")" """
    star = st.lit(pos, "*")
    if not star.ok:
        return star
    exact = st.number(star.pos)
    if exact.ok:
        return success((RepeatKind.EXACT, exact.value, exact.value), exact.pos)

    o = st.lit(star.pos, "(")
    if not o.ok:
        return o
    cur = st.skip_inline(o.pos)
    lo = st.number(cur)
    if lo.ok:
        cur = st.skip_inline(lo.pos)
    dash = st.lit(cur, "-")
    if not dash.ok:
        return dash
    cur = st.skip_inline(dash.pos)
    hi = st.number(cur)
    if hi.ok:
        cur = st.skip_inline(hi.pos)
    c = st.lit(cur, ")")
    if not c.ok:
        return c
    return success((RepeatKind.RANGE,
                    lo.value if lo.ok else None,
                    hi.value if hi.ok else None), c.pos)


# ---- bounded ----

@memoized
def bounded(st: ParseState, pos: int) -> Result:
    """bounded: group | list"""
    r = group(st, pos)
    if r.ok:
        return r
    return element_list(st, pos)


def group(st: ParseState, pos: int) -> Result:
    """group: "(" ruleElement ")" """
    o = st.lit(pos, "(")
    if not o.ok:
        return o
    inner = rule_element(st, st.skip(o.pos))
    if not inner.ok:
        return inner
    c = st.lit(st.skip(inner.pos), ")")
    if not c.ok:
        return c
    return success(Group(inner.value, span=st.span(pos, c.pos)), c.pos)


def element_list(st: ParseState, pos: int) -> Result:
    """list: "{" ruleElement ("," ruleElement)* ","? "}" """
    o = st.lit(pos, "{")
    if not o.ok:
        return o
    first = rule_element(st, st.skip(o.pos))
    if not first.ok:
        return first
    items = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip(end), ",")
        if not comma.ok:
            break
        end = comma.pos
        nxt = rule_element(st, st.skip(comma.pos))
        if not nxt.ok:
            break       # trailing separator
        items.append(nxt.value)
        end = nxt.pos
    c = st.lit(st.skip(end), "}")
    if not c.ok:
        return c
    return success(ElementList(tuple(items), span=st.span(pos, c.pos)), c.pos)


# ---- simple ----

@memoized
def simple(st: ParseState, pos: int) -> Result:
    """simple: <Syl> | @name | captureRef | fancyMatrix | $$ | * | . | $ | text"""
    syl = st.keyword(pos, "<Syl>")
    if syl.ok:
        return success(AnySyllable(span=st.span(pos, syl.pos)), syl.pos)

    for alt in (element_ref, capture_ref, environment.fancy_matrix):
        r = alt(st, pos)
        if r.ok:
            return r

    for lit, node_type in (("$$", BetweenWords), ("*", Empty),
                           (".", SyllableBoundary), ("$", WordBoundary)):
        r = st.lit(pos, lit)
        if r.ok:
            return success(node_type(span=st.span(pos, r.pos)), r.pos)

    return text(st, pos)


def element_ref(st: ParseState, pos: int) -> Result:
    """elementRef: "@" name"""
    at = st.lit(pos, "@")
    if not at.ok:
        return at
    name = st.name(at.pos)
    if not name.ok:
        return name
    return success(ElementRef(name.value, span=st.span(pos, name.pos)), name.pos)


def capture_ref(st: ParseState, pos: int) -> Result:
    """captureRef: "~"? "$" "."? NUMBER"""
    cur = pos
    inexact = st.lit(cur, "~")
    if inexact.ok:
        cur = inexact.pos
    dollar = st.lit(cur, "$")
    if not dollar.ok:
        return dollar
    cur = dollar.pos
    syl = st.lit(cur, ".")
    if syl.ok:
        cur = syl.pos
    index = st.number(cur)
    if not index.ok:
        return index
    return success(CaptureRef(index.value, inexact.ok, syl.ok, span=st.span(pos, index.pos)), index.pos)


def text(st: ParseState, pos: int) -> Result:
    """text: TEXT_CHAR+ "!"?"""
    raw = st.raw_text(pos)
    if not raw.ok:
        return raw
    end = raw.pos
    bang = st.lit(end, "!")
    if bang.ok:
        end = bang.pos
    return success(Text(unescape_text(raw.value), bang.ok, span=st.span(pos, end)), end)
