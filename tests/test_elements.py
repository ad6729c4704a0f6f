"""Pattern-expression grammar: precedence, postfix tokens, simple elements."""

import pytest

from lsc import parse_rule, ParseError
from lsc.grammar.ast import (
    RepeatKind, Text, Sequence, Repeat, Group, ElementList, Interfix,
    Negated, Capture, CaptureRef, ElementRef, AnySyllable, Empty,
    SyllableBoundary, WordBoundary, BetweenWords, Matrix, FeatureValue,
    NegatedValue, AbsentFeature, FeatureVariable, ConditionalElement,
    CompoundEnvironment, Environment,
)

a, b, c = Text("a"), Text("b"), Text("c")


def elem(src):
    return parse_rule("rule_element", src)


def test_single_member_is_not_wrapped():
    assert elem("a") == a


def test_sequence_binds_loosest():
    assert elem("a b+") == Sequence((a, Repeat(b, RepeatKind.ONE_OR_MORE, 1, None)))


def test_postfix_applies_to_group():
    assert elem("(a)+") == Repeat(Group(a), RepeatKind.ONE_OR_MORE, 1, None)


def test_interfix_chain_is_one_node():
    assert elem("a&b>c") == Interfix((a, b, c), ("&", ">"))


def test_intersection_not_wins_over_intersection():
    assert elem("a&!b") == Interfix((a, b), ("&!",))


def test_interfix_operand_inside_sequence():
    assert elem("a b&c") == Sequence((a, Interfix((b, c), ("&",))))


@pytest.mark.parametrize("src, kind, lo, hi", [
    ("a+", RepeatKind.ONE_OR_MORE, 1, None),
    ("a*", RepeatKind.ZERO_OR_MORE, 0, None),
    ("a?", RepeatKind.OPTIONAL, 0, 1),
    ("a*3", RepeatKind.EXACT, 3, 3),
    ("a*(2-4)", RepeatKind.RANGE, 2, 4),
    ("a*(2-)", RepeatKind.RANGE, 2, None),
    ("a*(-4)", RepeatKind.RANGE, None, 4),
])
def test_repeaters(src, kind, lo, hi):
    assert elem(src) == Repeat(a, kind, lo, hi)


def test_negation():
    assert elem("!a") == Negated(a)
    assert elem("!{a, b}") == Negated(ElementList((a, b)))


def test_negated_element_cannot_repeat():
    with pytest.raises(ParseError):
        elem("!a+")


def test_negated_element_can_capture():
    assert elem("!a$1") == Capture(Negated(a), 1)


def test_capture_flags():
    assert elem("a$1") == Capture(a, 1)
    assert elem("a~$.2") == Capture(a, 2, inexact=True, syllable=True)
    assert elem("$3") == CaptureRef(3)
    assert elem("~$1") == CaptureRef(1, inexact=True)


def test_list_allows_trailing_comma():
    assert elem("{a, b,}") == ElementList((a, b))
    assert elem("{\n  a,\n  b\n}") == ElementList((a, b))


@pytest.mark.parametrize("src, node", [
    ("$$", BetweenWords()),
    ("$", WordBoundary()),
    (".", SyllableBoundary()),
    ("*", Empty()),
    ("<Syl>", AnySyllable()),
    ("<syl>", AnySyllable()),
    ("@vowel", ElementRef("vowel")),
])
def test_simple_elements(src, node):
    assert elem(src) == node


def test_text_escape_and_bang():
    assert elem(r"\,x") == Text(",x")
    assert elem("a!") == Text("a", negated=True)


def test_fancy_matrix_values():
    assert elem("[+high -back]") == Matrix((FeatureValue("high", "+"), FeatureValue("back", "-")))
    assert elem("[!high *round $voice]") == Matrix((
        NegatedValue(FeatureValue("high")), AbsentFeature("round"), FeatureVariable("voice"),
    ))


def test_conditional_element():
    assert elem("a / b_") == ConditionalElement(
        a, CompoundEnvironment(Environment(b, None)))
    assert elem("a // b_c") == ConditionalElement(
        a, CompoundEnvironment(None, Environment(b, c)))


def test_conditional_element_inside_list():
    assert elem("{a / _b, c}") == ElementList((
        ConditionalElement(a, CompoundEnvironment(Environment(None, b))), c,
    ))


def test_sequence_does_not_cross_line_break():
    with pytest.raises(ParseError):
        elem("a\nb")


def test_element_spans():
    node = elem("a  b")
    assert (node.span.start, node.span.end) == (0, 4)
    assert (node.elements[1].span.start, node.elements[1].span.col) == (3, 4)
