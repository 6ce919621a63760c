"""Parse ignore-file text and normalize user-entered rules."""

from __future__ import annotations

from typing import Iterable

from code_context.utils import normalize_separators


def parse_ignore_lines(text: str | None) -> list[str]:
    """Return trimmed non-blank, non-comment lines of ignore-file text."""
    if not text:
        return []
    lines: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        lines.append(normalize_separators(line))
    return lines


def directory_pattern(name: str) -> str:
    cleaned = normalize_separators(name.strip())
    if not cleaned:
        return ""
    return cleaned if cleaned.endswith("/") else f"{cleaned}/"


def directory_patterns(names: Iterable[str]) -> list[str]:
    return [pattern for pattern in (directory_pattern(name) for name in names) if pattern]


def format_custom_rule(raw: str) -> str:
    # `.log` is an extension shorthand, not a dotfile name.
    rule = normalize_separators(raw.strip())
    if rule.startswith(".") and "*" not in rule and "/" not in rule:
        return f"*{rule}"
    return rule
