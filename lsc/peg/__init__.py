# lsc/peg/__init__.py
"""Ordered-choice (PEG) runtime for the LSC grammar.

This package provides:
- `Result` / `success` / `failure`: the value threaded through every rule
- `ParseState`: scanner + packrat memo + furthest-failure tracker
- `memoized`: rule decorator for the packrat memo
- `ParseError`: the single error kind the parser raises
"""

from .runtime import (
    Result, success, failure, ParseState, ParseError, memoized,
)
