"""Scanner primitives: positions, skipping, tokens."""

from lsc.lex import Scanner, normalize_newlines, unescape_text


def test_line_col_is_one_based():
    sc = Scanner("ab\ncd")
    assert sc.line_col(0) == (1, 1)
    assert sc.line_col(3) == (2, 1)
    assert sc.line_col(4) == (2, 2)


def test_span_records_start_line_and_column():
    sp = Scanner("x\n  yz").span(4, 6)
    assert (sp.start, sp.end, sp.line, sp.col) == (4, 6, 2, 3)


def test_skip_crosses_comments_and_newlines():
    src = "  # comment\n  x"
    assert Scanner(src).skip(0) == src.index("x")


def test_skip_inline_stops_at_line_break():
    sc = Scanner(" \t\n x")
    assert sc.skip_inline(0) == 2
    assert sc.has_line_break(0, sc.skip(0))
    assert not sc.has_line_break(0, 2)


def test_comment_is_not_inline_whitespace():
    assert Scanner("# c").skip_inline(0) == 0


def test_keyword_first_letter_case_only():
    assert Scanner("Feature x").match_keyword(0, "Feature") == 7
    assert Scanner("feature x").match_keyword(0, "Feature") == 7
    assert Scanner("FEATURE x").match_keyword(0, "Feature") is None


def test_keyword_needs_word_boundary():
    assert Scanner("Features").match_keyword(0, "Feature") is None
    assert Scanner("Romanizer-x").match_keyword(0, "Romanizer") == 9


def test_bracketed_keyword_flips_first_letter():
    assert Scanner("(syllable) x").match_keyword(0, "(Syllable)") == 10
    assert Scanner("<syl>").match_keyword(0, "<Syl>") == 5


def test_name_and_number():
    sc = Scanner("abc12-3")
    assert sc.match_name(0) == 5
    assert sc.match_number(0) is None
    assert sc.match_number(6) == 7


def test_text_stops_at_reserved_characters():
    sc = Scanner("tʃa=>b")
    assert sc.match_text(0) == 3
    assert Scanner("_x").match_text(0) is None


def test_text_escapes():
    src = r"a\,b c"
    assert Scanner(src).match_text(0) == 4
    assert unescape_text(r"a\,b") == "a,b"
    assert unescape_text(r"\\") == "\\"


def test_normalize_newlines():
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"
