"""Merge local and template ignore rules into one de-duplicated rule set."""

from __future__ import annotations

from typing import Iterable, Optional

from code_context.models import LoadedRules, Rule, RuleCategory, TemplateRules
from code_context.utils import normalize_separators


def _unique(lines: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for line in lines:
        normalized = normalize_separators(line.strip())
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
    return result


def build_rule_set(
    local_lines: Optional[Iterable[str]] = None,
    template_lines: Optional[Iterable[str]] = None,
    template_name: str = "",
) -> LoadedRules:
    local = _unique(local_lines or [])
    local_set = set(local)
    template = [line for line in _unique(template_lines or []) if line not in local_set]
    return LoadedRules(
        local=sorted(local),
        template=TemplateRules(name=template_name, rules=sorted(template)),
    )


def loaded_rules_to_rules(loaded: LoadedRules) -> list[Rule]:
    rules = [Rule(pattern, True, RuleCategory.LOCAL) for pattern in loaded.local]
    rules.extend(
        Rule(pattern, True, RuleCategory.TEMPLATE) for pattern in loaded.template.rules
    )
    return rules
