"""Whole-file parsing, error reporting and reparse stability."""

from dataclasses import fields

import pytest

from lsc import parse_lsc, parse_rule, load_lsc_text, walk, ParseError
from lsc.grammar.ast import (
    Text, Sequence, Repeat, RepeatKind, Interfix, Negated, Capture, ElementList,
    Environment, EnvironmentList, CompoundEnvironment, StandardExpression,
    FeatureDecl, DiacriticDecl, SymbolDecl, ClassDecl, ElementDecl, SyllableDecl,
    Deromanizer, Romanizer, ChangeRule, Matrix, Group, ConditionalElement,
)

SAMPLE = """\
# sample rule file
Feature height(*none, low, high)
Feature +nasal, voice
Diacritic ʰ [+aspirated]
Symbol ts [-continuant +delayed]
Class vowel {a, e, i, o, u}
Element stop {p, t, k}

Syllables:
  @stop? :: @vowel :: {n, m}?

Deromanizer:
  ph => f

palatalize ltr:
  k => tʃ / _{i, e}
  Then:
    (a)+ => * // $ _

lenition [-voice]
  @stop$1&[-voice] => [+voice]$1 / @vowel _ @vowel

Romanizer:
  tʃ => ch
"""

x, y, a, b, c, d = (Text(s) for s in "xyabcd")


def test_sample_statement_kinds():
    stmts = parse_lsc(SAMPLE)
    assert [type(s) for s in stmts] == [
        FeatureDecl, FeatureDecl, FeatureDecl, DiacriticDecl, SymbolDecl,
        ClassDecl, ElementDecl, SyllableDecl, Deromanizer, ChangeRule,
        ChangeRule, Romanizer,
    ]
    assert [s.name for s in stmts if isinstance(s, ChangeRule)] == ["palatalize", "lenition"]


def test_sample_statement_positions():
    stmts = parse_lsc(SAMPLE)
    assert (stmts[0].span.line, stmts[0].span.col) == (2, 1)
    assert stmts[-1].span.line == SAMPLE.count("\n") - 1


def test_empty_and_comment_only_files():
    assert parse_lsc("") == []
    assert parse_lsc("# nothing\n\n   # here\n") == []


def test_feature_list_is_three_statements_in_order():
    assert parse_lsc("Feature a, b, c") == [FeatureDecl("a"), FeatureDecl("b"), FeatureDecl("c")]


def test_symbol_matrix_and_list_paths():
    assert parse_lsc("Symbol x [+a]")[0].matrix is not None
    assert parse_lsc("Symbol x, y") == [SymbolDecl((x, y))]


def test_repeat_binds_tighter_than_sequence():
    assert parse_rule("rule_element", "a b+") == Sequence((a, Repeat(b, RepeatKind.ONE_OR_MORE, 1, None)))
    assert parse_rule("rule_element", "ab+") == Repeat(Text("ab"), RepeatKind.ONE_OR_MORE, 1, None)


def test_negated_capture_precedence():
    assert parse_rule("rule_element", "!a$1") == Capture(Negated(a), 1)


def test_interfix_forbids_whitespace():
    assert parse_rule("rule_element", "a&b>c") == Interfix((a, b, c), ("&", ">"))
    with pytest.raises(ParseError):
        parse_rule("rule_element", "a &b")


def test_standard_expression_with_condition():
    assert parse_lsc("x => y / a_b") == [
        StandardExpression(x, y, CompoundEnvironment(Environment(a, b)))]


def test_standard_expression_with_exclusion_list():
    (expr,) = parse_lsc("x => y // {a_b, c_d}")
    assert expr.environment == CompoundEnvironment(None, EnvironmentList((
        Environment(a, b), Environment(c, d))))


def test_explicit_syllables():
    assert parse_lsc("Syllable: Explicit") == [SyllableDecl("explicit")]


def test_missing_feature_name_error():
    with pytest.raises(ParseError) as exc:
        parse_lsc("Feature")
    err = exc.value
    assert err.position == 7
    assert (err.line, err.column) == (1, 8)
    assert "name" in err.expected
    assert str(err).startswith("Parse error at 1:8: expected one of {")
    assert str(err).endswith("Feature\n       ^")


def test_error_reports_furthest_line():
    with pytest.raises(ParseError) as exc:
        parse_lsc("a => b\nc =>")
    assert exc.value.line == 2


def test_error_expected_is_sorted_tuple():
    with pytest.raises(ParseError) as exc:
        parse_lsc("Class v {a, b")
    assert exc.value.expected == tuple(sorted(exc.value.expected))
    assert "'}'" in exc.value.expected


def test_parse_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        parse_lsc("=>")


def test_unknown_rule_name():
    with pytest.raises(KeyError):
        parse_rule("no_such_rule", "a")


_REPARSE_RULES = {
    StandardExpression: "standard_expression",
    ChangeRule: "change_rule",
    ClassDecl: "class_decl",
    SymbolDecl: "symbol_decl",
    DiacriticDecl: "diacritic_decl",
    ElementDecl: "element_decl",
    SyllableDecl: "syllable_decl",
    Deromanizer: "deromanizer",
    Romanizer: "romanizer",
    Matrix: "fancy_matrix",
    Sequence: "unconditional_rule_element",
    Interfix: "free_element",
    Capture: "interfix_element",
    Repeat: "interfix_element",
    Group: "bounded",
    ElementList: "bounded",
    ConditionalElement: "rule_element",
    CompoundEnvironment: "compound_environment",
}


def test_reparse_stability():
    checked = 0
    for stmt in parse_lsc(SAMPLE):
        for node in walk(stmt):
            rule = _REPARSE_RULES.get(type(node))
            if rule is None:
                continue
            fragment = SAMPLE[node.span.start:node.span.end]
            assert parse_rule(rule, fragment) == node, fragment
            checked += 1
    assert checked > 20


def test_walk_visits_nested_nodes_but_not_spans():
    expr = parse_rule("standard_expression", "a b => c / _d")
    kinds = [type(n).__name__ for n in walk(expr)]
    assert kinds[0] == "StandardExpression"
    assert kinds.count("Text") == 4
    assert "Span" not in kinds


def test_every_node_has_a_span():
    for stmt in parse_lsc(SAMPLE):
        for node in walk(stmt):
            assert "span" in {f.name for f in fields(node)}
            assert node.span is not None, node


def test_load_lsc_text_normalizes_newlines(tmp_path):
    path = tmp_path / "rules.lsc"
    path.write_bytes("Feature a\r\nFeature b\rFeature c".encode("utf-8"))
    src = load_lsc_text(str(path))
    assert src == "Feature a\nFeature b\nFeature c"
    assert len(parse_lsc(src)) == 3


def test_error_position_does_not_depend_on_preceding_syllables():
    tail = "r\n  a => b @"
    with pytest.raises(ParseError) as alone:
        parse_lsc(tail)
    prefix = "Syllables:\n  @v\n"
    with pytest.raises(ParseError) as after:
        parse_lsc(prefix + tail)
    assert alone.value.position == len(tail)
    assert after.value.position - len(prefix) == alone.value.position
    assert "name" in after.value.expected


def test_deep_nesting_reports_parse_error():
    assert parse_rule("rule_element", "(" * 30 + "a" + ")" * 30) is not None
    depth = 5000
    with pytest.raises(ParseError) as exc:
        parse_rule("rule_element", "(" * depth + "a" + ")" * depth)
    assert exc.value.expected == ("shallower nesting",)
