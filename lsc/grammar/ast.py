# lsc/grammar/ast.py
"""LSC syntax tree.

- Every node is a frozen dataclass with a `span` (excluded from equality, so
  a node re-parsed from its own span compares equal to the node it came from).
- Rule elements: Group / ElementList / Sequence / Interfix / Negated /
  Capture / Repeat / simple leaves / ConditionalElement
- Statements: the eleven declaration forms, in file order
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Iterator, Optional, Tuple, Union

from ..lex import Span


def _span():
    return field(default=None, compare=False)


class RepeatKind:
    EXACT        = "exact"
    ONE_OR_MORE  = "one_or_more"
    ZERO_OR_MORE = "zero_or_more"
    OPTIONAL     = "optional"
    RANGE        = "range"


class InterfixOp:
    INTERSECTION     = "&"
    INTERSECTION_NOT = "&!"
    TRANSFORMING     = ">"

    # longest first: "&!" must win over "&"
    ALL = (INTERSECTION_NOT, INTERSECTION, TRANSFORMING)


class DiacriticModifier:
    BEFORE   = "before"
    FIRST    = "first"
    FLOATING = "floating"


class SyllableDirective:
    EXPLICIT = "explicit"
    CLEAR    = "clear"


class RuleKeyword:
    LTR       = "ltr"
    RTL       = "rtl"
    PROPAGATE = "propagate"
    DEFER     = "defer"
    CLEANUP   = "cleanup"


class BlockKind:
    THEN = "then"   # all matching
    ELSE = "else"   # first matching


# ==== matrices ====

@dataclass(frozen=True)
class FeatureValue:
    name: str
    sign: Optional[str] = None      # "+", "-" or None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class NegatedValue:
    value: FeatureValue
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class AbsentFeature:
    name: str
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class FeatureVariable:
    name: str
    span: Optional[Span] = _span()


MatrixValue = Union[FeatureValue, NegatedValue, AbsentFeature, FeatureVariable]


@dataclass(frozen=True)
class Matrix:
    values: Tuple[MatrixValue, ...] = ()
    span: Optional[Span] = _span()

    @property
    def is_fancy(self) -> bool:
        return any(not isinstance(v, FeatureValue) for v in self.values)


# ==== simple elements ====

@dataclass(frozen=True)
class AnySyllable:
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ElementRef:
    name: str
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class CaptureRef:
    index: int
    inexact: bool = False
    syllable: bool = False
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Empty:
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class SyllableBoundary:
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class WordBoundary:
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class BetweenWords:
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Text:
    literal: str            # escapes removed
    negated: bool = False   # trailing "!"
    span: Optional[Span] = _span()


# ==== compound elements ====

@dataclass(frozen=True)
class Group:
    element: "RuleElement"
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ElementList:
    """{a, b, c}: alternatives, first match wins."""
    elements: Tuple["RuleElement", ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Sequence:
    """Two or more free elements separated by whitespace."""
    elements: Tuple["RuleElement", ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Interfix:
    """a&b>c: left-associative, len(operators) == len(operands) - 1."""
    operands: Tuple["RuleElement", ...]
    operators: Tuple[str, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Negated:
    element: "RuleElement"
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Capture:
    element: "RuleElement"
    index: int
    inexact: bool = False
    syllable: bool = False
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Repeat:
    element: "RuleElement"
    kind: str
    minimum: Optional[int] = None   # None: unbounded
    maximum: Optional[int] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ConditionalElement:
    """A rule element restricted by its own environment."""
    element: "RuleElement"
    environment: "CompoundEnvironment"
    span: Optional[Span] = _span()


RuleElement = Union[
    Group, ElementList, Sequence, Interfix, Negated, Capture, Repeat,
    AnySyllable, ElementRef, CaptureRef, Matrix, Empty,
    SyllableBoundary, WordBoundary, BetweenWords, Text, ConditionalElement,
]


# ==== environments ====

@dataclass(frozen=True)
class Environment:
    """before _ after; without an anchor the whole element sits in `before`."""
    before: Optional[RuleElement] = None
    after: Optional[RuleElement] = None
    anchored: bool = True
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class EnvironmentList:
    """{env, env}: satisfied by any member."""
    environments: Tuple[Environment, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class CompoundEnvironment:
    condition: Optional[Union[Environment, EnvironmentList]] = None
    exclusion: Optional[Union[Environment, EnvironmentList]] = None
    span: Optional[Span] = _span()


# ==== rule expressions and blocks ====

@dataclass(frozen=True)
class StandardExpression:
    source: RuleElement
    target: RuleElement
    environment: Optional[CompoundEnvironment] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class KeywordExpression:
    keyword: str    # "unchanged" | "off"
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class BlockRef:
    name: str
    span: Optional[Span] = _span()


Expression = Union[StandardExpression, KeywordExpression, BlockRef]


@dataclass(frozen=True)
class KeywordModifier:
    keyword: str
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class FilterModifier:
    filter: Union[ElementRef, Matrix]
    span: Optional[Span] = _span()


Modifier = Union[KeywordModifier, FilterModifier]


@dataclass(frozen=True)
class ExpressionList:
    expressions: Tuple[Expression, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class BlockContinuation:
    kind: str       # BlockKind
    modifiers: Tuple[Modifier, ...]
    element: "BlockElement"
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Block:
    element: "BlockElement"
    continuations: Tuple[BlockContinuation, ...] = ()
    span: Optional[Span] = _span()


BlockElement = Union[ExpressionList, Block]


# ==== syllables ====

@dataclass(frozen=True)
class StructuredPattern:
    onset: RuleElement
    nucleus: RuleElement
    coda: Optional[RuleElement] = None
    reluctant_onset: Optional[RuleElement] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class SyllableExpression:
    pattern: Union[StructuredPattern, RuleElement]
    matrix: Optional[Matrix] = None
    environment: Optional[CompoundEnvironment] = None
    span: Optional[Span] = _span()


# ==== statements ====

@dataclass(frozen=True)
class FeatureDecl:
    name: str
    values: Tuple[str, ...] = ()
    null_alias: Optional[str] = None
    syllable: bool = False
    plus: bool = False
    span: Optional[Span] = _span()

    @property
    def is_boolean(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class DiacriticDecl:
    text: Text
    matrix: Matrix
    modifiers: Tuple[str, ...] = ()     # DiacriticModifier, source order
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class SymbolDecl:
    names: Tuple[Text, ...]
    matrix: Optional[Matrix] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ClassDecl:
    name: str
    elements: Tuple[Union[ElementRef, Text], ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ElementDecl:
    name: str
    element: RuleElement
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class SyllableDecl:
    directive: Optional[str] = None     # SyllableDirective
    expressions: Tuple[SyllableExpression, ...] = ()
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Deromanizer:
    block: Block
    literal: bool = False
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Romanizer:
    block: Block
    literal: bool = False
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class InterRomanizer:
    name: str
    block: Block
    literal: bool = False
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ChangeRule:
    name: str
    block: Block
    modifiers: Tuple[Modifier, ...] = ()
    span: Optional[Span] = _span()


Statement = Union[
    FeatureDecl, DiacriticDecl, SymbolDecl, ClassDecl, ElementDecl,
    SyllableDecl, Deromanizer, Romanizer, InterRomanizer, ChangeRule,
    StandardExpression,
]


def walk(node) -> Iterator[object]:
    """Depth-first, parents before children; spans are not visited."""
    yield node
    for f in fields(node):
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if is_dataclass(value):
            yield from walk(value)
        elif isinstance(value, tuple):
            for item in value:
                if is_dataclass(item):
                    yield from walk(item)
