"""Tests for rule-set aggregation."""

from code_context.models import RuleCategory
from code_context.rules.ruleset import build_rule_set, loaded_rules_to_rules


def test_template_duplicates_of_local_are_dropped() -> None:
    loaded = build_rule_set(["node_modules/"], ["node_modules/", "*.log"], "Node")

    assert loaded.local == ["node_modules/"]
    assert loaded.template.name == "Node"
    assert loaded.template.rules == ["*.log"]


def test_duplicates_compared_after_separator_normalization() -> None:
    loaded = build_rule_set(["build/out"], ["build\\out", "dist/"], "Custom")

    assert loaded.template.rules == ["dist/"]


def test_output_sorted_and_unique() -> None:
    loaded = build_rule_set(["b", "a", "b"], ["z", "y", "z"], "T")

    assert loaded.local == ["a", "b"]
    assert loaded.template.rules == ["y", "z"]


def test_absent_inputs_default_to_empty() -> None:
    loaded = build_rule_set()

    assert loaded.local == []
    assert loaded.template.rules == []
    assert loaded.as_dict() == {"local": [], "template": {"name": "", "rules": []}}


def test_loaded_rules_to_rules_categorizes_and_checks() -> None:
    rules = loaded_rules_to_rules(build_rule_set(["a/"], ["*.pyc"], "Python"))

    assert [(rule.pattern, rule.category, rule.checked) for rule in rules] == [
        ("a/", RuleCategory.LOCAL, True),
        ("*.pyc", RuleCategory.TEMPLATE, True),
    ]
