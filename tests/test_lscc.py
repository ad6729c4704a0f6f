"""lscc command line."""

from lsc.lscc import main

RULES = "Feature +voice\nx => y / a_b\n"


def _write(tmp_path, text):
    path = tmp_path / "rules.lsc"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_check_ok(tmp_path, capsys):
    assert main(["check", _write(tmp_path, RULES)]) == 0
    out = capsys.readouterr().out
    assert out.strip() == "[CHECK OK] statements=2 FeatureDecl=1 StandardExpression=1"


def test_check_debug_prints_statements(tmp_path, capsys):
    assert main(["check", _write(tmp_path, RULES), "-D"]) == 0
    err = capsys.readouterr().err
    assert "[DEBUG] parsed | statements=2" in err
    assert "StandardExpression(" in err


def test_check_syntax_error(tmp_path, capsys):
    assert main(["check", _write(tmp_path, "Feature")]) == 2
    err = capsys.readouterr().err
    assert "[SYNTAX ERROR]" in err
    assert "Parse error at 1:8" in err


def test_check_missing_file(tmp_path, capsys):
    assert main(["check", str(tmp_path / "missing.lsc")]) == 2
    assert "[ERROR] FileNotFoundError" in capsys.readouterr().err


def test_dump(tmp_path, capsys):
    assert main(["dump", _write(tmp_path, RULES)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("000: 1:1")
    assert "StandardExpression" in lines[1]


def test_parse_fragment(capsys):
    assert main(["parse", "--rule", "rule_element", "--text", "a b+"]) == 0
    assert capsys.readouterr().out.startswith("Sequence(")


def test_parse_fragment_from_file(tmp_path, capsys):
    path = _write(tmp_path, "[+high -back]")
    assert main(["parse", "--rule", "matrix", "--input", path]) == 0
    assert capsys.readouterr().out.startswith("Matrix(")


def test_parse_unknown_rule(capsys):
    assert main(["parse", "--rule", "nope", "--text", "a"]) == 2
    assert "[ERROR] Unknown rule: nope" in capsys.readouterr().err
