# lsc/lscc.py
"""lscc – LSC rule-file CLI

Usage
    $ python -m lsc.lscc check rules/english.lsc -D
    $ python -m lsc.lscc dump rules/english.lsc
    $ python -m lsc.lscc parse --rule rule_element --text "{a, e}&[+stress]"

Commands
--------
- check : parse a rule file and print a per-kind statement summary
- dump  : print every statement with its line:column
- parse : parse a fragment as a single grammar rule and print the tree

With -D/--debug, check also prints every statement to stderr.
"""

from __future__ import annotations
import argparse
import sys
from collections import Counter
from typing import Optional

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load_statements(path: str, debug: bool):
    from .grammar.loader import load_lsc_text
    from .grammar.parser import parse_lsc

    src = load_lsc_text(path)
    if debug: _eprint("[DEBUG] source loaded | chars=%d" % len(src))

    stmts = parse_lsc(src)
    if debug: _eprint("[DEBUG] parsed | statements=%d" % len(stmts))
    return stmts


def _summary(stmts) -> str:
    counts = Counter(type(s).__name__ for s in stmts)
    return " ".join(f"{kind}={n}" for kind, n in sorted(counts.items()))

# ------------------------------
# commands
# ------------------------------

def cmd_check(args) -> int:
    try:
        stmts = _load_statements(args.file, debug=args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _eprint("\n[STATEMENTS]")
        for s in stmts:
            _eprint("  " + repr(s))

    line = f"[CHECK OK] statements={len(stmts)}"
    if stmts:
        line += " " + _summary(stmts)
    print(line)
    return 0


def cmd_dump(args) -> int:
    try:
        stmts = _load_statements(args.file, debug=False)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    for i, s in enumerate(stmts):
        print(f"{i:03d}: {s.span.line}:{s.span.col:<4} {type(s).__name__:<18} {s!r}")
    return 0


def cmd_parse(args) -> int:
    """Parse a fragment with one named rule (see lsc.grammar.parser.RULES)."""
    from .grammar.parser import RULES, parse_rule
    from .lex import normalize_newlines

    if args.rule not in RULES:
        _eprint(f"[ERROR] Unknown rule: {args.rule}")
        _eprint("  rules: " + ", ".join(sorted(RULES)))
        return 2
    try:
        if args.text is not None:
            text = normalize_newlines(args.text)
        else:
            from .grammar.loader import load_lsc_text
            text = load_lsc_text(args.input)
        node = parse_rule(args.rule, text)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    print(repr(node))
    return 0


# ------------------------------
# entry point
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="lscc", description="LSC rule-file parser CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="parse a rule file and summarise its statements")
    p_check.add_argument("file", help=".lsc rule file")
    p_check.add_argument("-D", "--debug", action="store_true", help="print every statement to stderr")
    p_check.set_defaults(func=cmd_check)

    p_dump = sub.add_parser("dump", help="print every statement with its position")
    p_dump.add_argument("file", help=".lsc rule file")
    p_dump.set_defaults(func=cmd_dump)

    p_parse = sub.add_parser("parse", help="parse a fragment as a single grammar rule")
    p_parse.add_argument("--rule", required=True, help="grammar rule name, e.g. rule_element")
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="fragment given inline")
    src_group.add_argument("--input", help="path of a file holding the fragment")
    p_parse.set_defaults(func=cmd_parse)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
