# lsc/grammar/declarations.py
"""Declaration grammar: the top-level statement forms and rule blocks.

    featureDecl     := Feature ( axis | plusFeature ("," plusFeature)* )
    diacriticDecl   := Diacritic text modifier* matrix modifier*
    symbolDecl      := Symbol text ( matrix | ("," text)* )
    classDecl       := Class name "{" (@name | text) ("," ...)* ","? "}"
    elementDecl     := Element name ruleElement
    syllableDecl    := Syllables ":" ( Explicit | Clear | syllableExpression+ )
    deromanizer     := Deromanizer Literal? ":" block
    interRomanizer  := Romanizer "-" ruleName Literal? ":" block
    romanizer       := Romanizer Literal? ":" block
    changeRule      := ruleName modifier* ":"? block
    block           := blockElement ((Then | Else) modifier* ":" blockElement)*
    blockElement    := expression+ | "(" block ")"
    expression      := Unchanged | Off | ":" ruleName | standardExpression
    standardExpr    := ruleElement "=>" unconditionalRuleElement compoundEnvironment?
"""

from __future__ import annotations
from typing import List, Optional

from ..peg import ParseState, Result, success, failure, memoized
from .ast import (
    DiacriticModifier, SyllableDirective, RuleKeyword, BlockKind,
    FeatureDecl, DiacriticDecl, SymbolDecl, ClassDecl, ElementDecl,
    SyllableDecl, SyllableExpression, StructuredPattern,
    Deromanizer, Romanizer, InterRomanizer, ChangeRule,
    Block, BlockContinuation, ExpressionList, StandardExpression,
    KeywordExpression, BlockRef, KeywordModifier, FilterModifier,
)
from . import elements
from . import environment

DECLARATION_KEYWORDS = (
    "Feature", "Diacritic", "Symbol", "Class", "Element",
    "Syllables", "Syllable", "Deromanizer", "Romanizer",
)

_RULE_KEYWORDS = (
    (RuleKeyword.LTR, "LTR"),
    (RuleKeyword.RTL, "RTL"),
    (RuleKeyword.PROPAGATE,),
    (RuleKeyword.DEFER,),
    (RuleKeyword.CLEANUP,),
)

_DIACRITIC_MODIFIERS = {
    "(Before)": DiacriticModifier.BEFORE,
    "(First)": DiacriticModifier.FIRST,
    "(Floating)": DiacriticModifier.FLOATING,
}


# ==== features ====

def _syllable_modifier(st: ParseState, pos: int) -> Result:
    return st.keyword(pos, "(Syllable)")


def plus_feature(st: ParseState, pos: int) -> Result:
    """plusFeature: "(Syllable)"? "+"? name"""
    cur = pos
    syl = _syllable_modifier(st, cur)
    if syl.ok:
        cur = st.skip_inline(syl.pos)
    plus = st.lit(cur, "+")
    if plus.ok:
        cur = st.skip_inline(plus.pos)
    name = st.name(cur)
    if not name.ok:
        return name
    return success(FeatureDecl(name.value, syllable=syl.ok, plus=plus.ok,
                               span=st.span(pos, name.pos)), name.pos)


def _feature_axis(st: ParseState, start: int, pos: int) -> Result:
    """"(Syllable)"? name "(" ("*" nullAlias ",")? value ("," value)* ")" """
    cur = pos
    syl = _syllable_modifier(st, cur)
    if syl.ok:
        cur = st.skip_inline(syl.pos)
    name = st.name(cur)
    if not name.ok:
        return name
    o = st.lit(st.skip_inline(name.pos), "(")
    if not o.ok:
        return o
    cur = st.skip(o.pos)

    null_alias: Optional[str] = None
    star = st.lit(cur, "*")
    if star.ok:
        alias = st.name(star.pos)
        if not alias.ok:
            return alias
        comma = st.lit(st.skip(alias.pos), ",")
        if not comma.ok:
            return comma
        null_alias = alias.value
        cur = st.skip(comma.pos)

    first = st.name(cur)
    if not first.ok:
        return first
    values = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip(end), ",")
        if not comma.ok:
            break
        nxt = st.name(st.skip(comma.pos))
        if not nxt.ok:
            return nxt
        values.append(nxt.value)
        end = nxt.pos
    c = st.lit(st.skip(end), ")")
    if not c.ok:
        return c
    return success(FeatureDecl(name.value, tuple(values), null_alias, syl.ok,
                               span=st.span(start, c.pos)), c.pos)


def feature_decl(st: ParseState, pos: int) -> Result:
    """Value is a tuple of FeatureDecl: one per boolean feature, or the single axis."""
    kw = st.keyword(pos, "Feature")
    if not kw.ok:
        return kw
    cur = st.skip(kw.pos)

    axis = _feature_axis(st, pos, cur)
    if axis.ok:
        return success((axis.value,), axis.pos)

    first = plus_feature(st, cur)
    if not first.ok:
        return first
    features = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip_inline(end), ",")
        if not comma.ok:
            break
        nxt = plus_feature(st, st.skip(comma.pos))
        if not nxt.ok:
            break
        features.append(nxt.value)
        end = nxt.pos
    return success(tuple(features), end)


# ==== diacritics, symbols, classes, elements ====

def _diacritic_modifier(st: ParseState, pos: int) -> Result:
    for spelling, modifier in _DIACRITIC_MODIFIERS.items():
        r = st.keyword(pos, spelling)
        if r.ok:
            return success(modifier, r.pos)
    return failure(pos)


def diacritic_decl(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Diacritic")
    if not kw.ok:
        return kw
    txt = elements.text(st, st.skip(kw.pos))
    if not txt.ok:
        return txt
    modifiers: List[str] = []
    cur = st.skip_inline(txt.pos)
    while True:
        m = _diacritic_modifier(st, cur)
        if not m.ok:
            break
        modifiers.append(m.value)
        cur = st.skip_inline(m.pos)
    mx = environment.matrix(st, cur)
    if not mx.ok:
        return mx
    end = mx.pos
    while True:
        m = _diacritic_modifier(st, st.skip_inline(end))
        if not m.ok:
            break
        modifiers.append(m.value)
        end = m.pos
    return success(DiacriticDecl(txt.value, mx.value, tuple(modifiers),
                                 span=st.span(pos, end)), end)


def symbol_decl(st: ParseState, pos: int) -> Result:
    """Symbol name [matrix]  |  Symbol name, name, ..."""
    kw = st.keyword(pos, "Symbol")
    if not kw.ok:
        return kw
    first = elements.text(st, st.skip(kw.pos))
    if not first.ok:
        return first

    mx = environment.matrix(st, st.skip_inline(first.pos))
    if mx.ok:
        return success(SymbolDecl((first.value,), mx.value, span=st.span(pos, mx.pos)), mx.pos)

    names = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip_inline(end), ",")
        if not comma.ok:
            break
        nxt = elements.text(st, st.skip(comma.pos))
        if not nxt.ok:
            break
        names.append(nxt.value)
        end = nxt.pos
    return success(SymbolDecl(tuple(names), None, span=st.span(pos, end)), end)


def _class_element(st: ParseState, pos: int) -> Result:
    r = elements.element_ref(st, pos)
    if r.ok:
        return r
    return elements.text(st, pos)


def class_decl(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Class")
    if not kw.ok:
        return kw
    name = st.name(st.skip(kw.pos))
    if not name.ok:
        return name
    o = st.lit(st.skip(name.pos), "{")
    if not o.ok:
        return o
    first = _class_element(st, st.skip(o.pos))
    if not first.ok:
        return first
    items = [first.value]
    end = first.pos
    while True:
        comma = st.lit(st.skip(end), ",")
        if not comma.ok:
            break
        end = comma.pos
        nxt = _class_element(st, st.skip(comma.pos))
        if not nxt.ok:
            break       # trailing separator
        items.append(nxt.value)
        end = nxt.pos
    c = st.lit(st.skip(end), "}")
    if not c.ok:
        return c
    return success(ClassDecl(name.value, tuple(items), span=st.span(pos, c.pos)), c.pos)


def element_decl(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Element")
    if not kw.ok:
        return kw
    name = st.name(st.skip(kw.pos))
    if not name.ok:
        return name
    elem = elements.rule_element(st, st.skip(name.pos))
    if not elem.ok:
        return elem
    return success(ElementDecl(name.value, elem.value, span=st.span(pos, elem.pos)), elem.pos)


# ==== syllables ====

def _at_statement_head(st: ParseState, pos: int) -> bool:
    """Look-ahead: a declaration keyword, a change-rule header `name mods... :`,
    or a whole colon-less change rule."""
    if st.match_keyword(pos, *DECLARATION_KEYWORDS) is not None:
        return True
    with st.quiet():
        name = rule_name(st, pos)
        if not name.ok:
            return False
        cur = _modifiers(st, name.pos)[1]
        if _block_colon(st, st.skip_inline(cur)).ok:
            return True
        return change_rule(st, pos).ok


def structured_pattern(st: ParseState, pos: int) -> Result:
    """(reluctantOnset "?:")? onset "::" nucleus ("::" coda)?"""
    cur = pos
    reluctant = None
    head = elements.unconditional_rule_element(st, cur)
    if head.ok:
        q = st.lit(st.skip_inline(head.pos), "?:")
        if q.ok:
            reluctant = head.value
            cur = st.skip_inline(q.pos)

    onset = elements.unconditional_rule_element(st, cur)
    if not onset.ok:
        return onset
    dc = st.lit(st.skip_inline(onset.pos), "::")
    if not dc.ok:
        return dc
    nucleus = elements.unconditional_rule_element(st, st.skip_inline(dc.pos))
    if not nucleus.ok:
        return nucleus
    end = nucleus.pos
    coda = None
    dc2 = st.lit(st.skip_inline(end), "::")
    if dc2.ok:
        c = elements.unconditional_rule_element(st, st.skip_inline(dc2.pos))
        if c.ok:
            coda = c.value
            end = c.pos
    return success(StructuredPattern(onset.value, nucleus.value, coda, reluctant,
                                     span=st.span(pos, end)), end)


def syllable_expression(st: ParseState, pos: int) -> Result:
    """syllableExpression: syllablePattern ("=>" matrix)? compoundEnvironment?"""
    if _at_statement_head(st, pos):
        return failure(pos)
    pat = structured_pattern(st, pos)
    if not pat.ok:
        pat = elements.unconditional_rule_element(st, pos)
    if not pat.ok:
        return pat
    end = pat.pos

    mx_value = None
    arrow = st.lit(st.skip_inline(end), "=>")
    if arrow.ok:
        mx = environment.matrix(st, st.skip(arrow.pos))
        if mx.ok:
            mx_value = mx.value
            end = mx.pos

    env_value = None
    env = environment.compound_environment(st, st.skip_inline(end))
    if env.ok:
        env_value = env.value
        end = env.pos
    return success(SyllableExpression(pat.value, mx_value, env_value,
                                      span=st.span(pos, end)), end)


def syllable_decl(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Syllables", "Syllable")
    if not kw.ok:
        return kw
    colon = st.lit(st.skip_inline(kw.pos), ":")
    if not colon.ok:
        return colon
    cur = st.skip(colon.pos)

    for word, directive in (("Explicit", SyllableDirective.EXPLICIT),
                            ("Clear", SyllableDirective.CLEAR)):
        d = st.keyword(cur, word)
        if d.ok:
            return success(SyllableDecl(directive, span=st.span(pos, d.pos)), d.pos)

    first = syllable_expression(st, cur)
    if not first.ok:
        return first
    exprs = [first.value]
    end = first.pos
    while True:
        nxt = syllable_expression(st, st.skip(end))
        if not nxt.ok:
            break
        exprs.append(nxt.value)
        end = nxt.pos
    return success(SyllableDecl(None, tuple(exprs), span=st.span(pos, end)), end)


# ==== romanizers ====

def _literal_and_block(st: ParseState, pos: int) -> Result:
    """(Literal)? ":" block  -- value: (literal, block)"""
    cur = pos
    lit_kw = st.keyword(st.skip_inline(cur), "Literal")
    if lit_kw.ok:
        cur = lit_kw.pos
    colon = st.lit(st.skip_inline(cur), ":")
    if not colon.ok:
        return colon
    blk = block(st, st.skip(colon.pos))
    if not blk.ok:
        return blk
    return success((lit_kw.ok, blk.value), blk.pos)


def deromanizer(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Deromanizer")
    if not kw.ok:
        return kw
    body = _literal_and_block(st, kw.pos)
    if not body.ok:
        return body
    literal, blk = body.value
    return success(Deromanizer(blk, literal, span=st.span(pos, body.pos)), body.pos)


def romanizer(st: ParseState, pos: int) -> Result:
    kw = st.keyword(pos, "Romanizer")
    if not kw.ok:
        return kw
    body = _literal_and_block(st, kw.pos)
    if not body.ok:
        return body
    literal, blk = body.value
    return success(Romanizer(blk, literal, span=st.span(pos, body.pos)), body.pos)


def inter_romanizer(st: ParseState, pos: int) -> Result:
    """Romanizer-<language>: romanizes for an intermediate language."""
    kw = st.keyword(pos, "Romanizer")
    if not kw.ok:
        return kw
    dash = st.lit(kw.pos, "-")
    if not dash.ok:
        return dash
    name = rule_name(st, dash.pos)
    if not name.ok:
        return name
    body = _literal_and_block(st, name.pos)
    if not body.ok:
        return body
    literal, blk = body.value
    return success(InterRomanizer(name.value, blk, literal, span=st.span(pos, body.pos)), body.pos)


# ==== change rules ====

def rule_name(st: ParseState, pos: int) -> Result:
    """ruleName: name ("-" (name | number))*"""
    first = st.name(pos)
    if not first.ok:
        return first
    end = first.pos
    while True:
        dash = st.lit(end, "-")
        if not dash.ok:
            break
        part = st.name(dash.pos)
        if not part.ok:
            break
        end = part.pos
    return success(st.src[pos:end], end)


def modifier(st: ParseState, pos: int) -> Result:
    """changeRuleModifier: @name | fancyMatrix | ltr | rtl | propagate | defer | cleanup"""
    for alt in (elements.element_ref, environment.fancy_matrix):
        f = alt(st, pos)
        if f.ok:
            return success(FilterModifier(f.value, span=st.span(pos, f.pos)), f.pos)
    for spellings in _RULE_KEYWORDS:
        k = st.keyword(pos, *spellings)
        if k.ok:
            return success(KeywordModifier(spellings[0], span=st.span(pos, k.pos)), k.pos)
    return failure(pos)


def _modifiers(st: ParseState, pos: int):
    """Inline-separated modifiers after pos: (tuple, end)."""
    mods = []
    end = pos
    while True:
        gap = st.skip_inline(end)
        if gap == end:
            break
        m = modifier(st, gap)
        if not m.ok:
            break
        mods.append(m.value)
        end = m.pos
    return tuple(mods), end


def _block_colon(st: ParseState, pos: int) -> Result:
    """":" opening a block (never the first half of "::")"""
    colon = st.lit(pos, ":")
    if not colon.ok or st.peek(colon.pos) == ":":
        return failure(pos)
    return colon


def change_rule(st: ParseState, pos: int) -> Result:
    name = rule_name(st, pos)
    if not name.ok:
        return name
    mods, cur = _modifiers(st, name.pos)
    colon = _block_colon(st, st.skip_inline(cur))
    if colon.ok:
        body = st.skip(colon.pos)
    else:
        # without ":" the block has to start on a new line
        body = st.skip(cur)
        if not st.has_line_break(cur, body):
            return failure(pos)
    blk = block(st, body)
    if not blk.ok:
        return blk
    return success(ChangeRule(name.value, blk.value, mods, span=st.span(pos, blk.pos)), blk.pos)


# ==== blocks and expressions ====

@memoized
def block(st: ParseState, pos: int) -> Result:
    first = block_element(st, pos)
    if not first.ok:
        return first
    continuations: List[BlockContinuation] = []
    end = first.pos
    while True:
        start = st.skip(end)
        kind = st.keyword(start, "Then")
        if kind.ok:
            kind_value = BlockKind.THEN
        else:
            kind = st.keyword(start, "Else")
            kind_value = BlockKind.ELSE
        if not kind.ok:
            break
        mods, cur = _modifiers(st, kind.pos)
        colon = _block_colon(st, st.skip_inline(cur))
        if not colon.ok:
            break
        elem = block_element(st, st.skip(colon.pos))
        if not elem.ok:
            break
        continuations.append(BlockContinuation(kind_value, mods, elem.value,
                                               span=st.span(start, elem.pos)))
        end = elem.pos
    return success(Block(first.value, tuple(continuations), span=st.span(pos, end)), end)


def block_element(st: ParseState, pos: int) -> Result:
    """blockElement: expressionList | "(" block ")" """
    r = expression_list(st, pos)
    if r.ok:
        return r
    o = st.lit(pos, "(")
    if not o.ok:
        return o
    inner = block(st, st.skip(o.pos))
    if not inner.ok:
        return inner
    c = st.lit(st.skip(inner.pos), ")")
    if not c.ok:
        return c
    return success(inner.value, c.pos)


def expression_list(st: ParseState, pos: int) -> Result:
    first = expression(st, pos)
    if not first.ok:
        return first
    exprs = [first.value]
    end = first.pos
    while True:
        nxt = expression(st, st.skip(end))
        if not nxt.ok:
            break
        exprs.append(nxt.value)
        end = nxt.pos
    return success(ExpressionList(tuple(exprs), span=st.span(pos, end)), end)


def expression(st: ParseState, pos: int) -> Result:
    """expression: keywordExpression | blockRef | standardExpression"""
    for word in ("Unchanged", "Off"):
        k = st.keyword(pos, word)
        if k.ok:
            return success(KeywordExpression(k.value, span=st.span(pos, k.pos)), k.pos)
    ref = _block_ref(st, pos)
    if ref.ok:
        return ref
    return standard_expression(st, pos)


def _block_ref(st: ParseState, pos: int) -> Result:
    colon = st.lit(pos, ":")
    if not colon.ok:
        return colon
    name = rule_name(st, colon.pos)
    if not name.ok:
        return name
    return success(BlockRef(name.value, span=st.span(pos, name.pos)), name.pos)


@memoized
def standard_expression(st: ParseState, pos: int) -> Result:
    """standardExpression: ruleElement "=>" unconditionalRuleElement compoundEnvironment?"""
    src = elements.rule_element(st, pos)
    if not src.ok:
        return src
    arrow = st.lit(st.skip_inline(src.pos), "=>")
    if not arrow.ok:
        return arrow
    tgt = elements.unconditional_rule_element(st, st.skip(arrow.pos))
    if not tgt.ok:
        return tgt
    end = tgt.pos
    env_value = None
    env = environment.compound_environment(st, st.skip_inline(end))
    if env.ok:
        env_value = env.value
        end = env.pos
    return success(StandardExpression(src.value, tgt.value, env_value,
                                      span=st.span(pos, end)), end)
