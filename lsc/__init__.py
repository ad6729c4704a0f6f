# lsc/__init__.py
"""LSC: parser for the Lexurgy-style sound-change rule language.

    from lsc import parse_lsc
    statements = parse_lsc(open("rules.lsc").read())
"""

from .peg import ParseError
from .grammar.parser import parse_lsc, parse_rule
from .grammar.loader import load_lsc_text
from .grammar.ast import walk

__all__ = ["parse_lsc", "parse_rule", "load_lsc_text", "walk", "ParseError"]
