"""Tests for ignore-file parsing and rule normalization."""

from code_context.rules.parser import (
    directory_pattern,
    directory_patterns,
    format_custom_rule,
    parse_ignore_lines,
)


def test_parse_strips_comments_and_blanks() -> None:
    text = "# deps\nnode_modules/\n\n   \n  *.log  \n#dist\n"
    assert parse_ignore_lines(text) == ["node_modules/", "*.log"]


def test_parse_handles_crlf_and_backslashes() -> None:
    text = "build\\out\r\n.env\r\n"
    assert parse_ignore_lines(text) == ["build/out", ".env"]


def test_parse_absent_input() -> None:
    assert parse_ignore_lines(None) == []
    assert parse_ignore_lines("") == []


def test_directory_pattern_adds_trailing_slash() -> None:
    assert directory_pattern("node_modules") == "node_modules/"
    assert directory_pattern("dist/") == "dist/"
    assert directory_pattern("  ") == ""


def test_directory_patterns_skips_empty() -> None:
    assert directory_patterns(["vendor", "", ".next"]) == ["vendor/", ".next/"]


def test_format_custom_rule_extension_shorthand() -> None:
    assert format_custom_rule(".log") == "*.log"
    assert format_custom_rule(" .env ") == "*.env"


def test_format_custom_rule_leaves_globs_and_paths() -> None:
    assert format_custom_rule("*.log") == "*.log"
    assert format_custom_rule(".github/workflows") == ".github/workflows"
    assert format_custom_rule("src\\main.py") == "src/main.py"
    assert format_custom_rule("") == ""
