from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from code_context.utils import normalize_separators


class Mode(str, Enum):
    EXCLUDE = "exclude"
    INCLUDE = "include"


class RuleCategory(str, Enum):
    LOCAL = "local"
    TEMPLATE = "template"
    CUSTOM = "custom"
    IMPORTED = "imported"


class ResolutionStatus(str, Enum):
    READY = "ready"
    NEEDS_CONFIRMATION = "needs_confirmation"
    EMPTY_WHITELIST = "empty_whitelist"


class GenerationStatus(str, Enum):
    WRITTEN = "written"
    NEEDS_CONFIRMATION = "needs_confirmation"
    EMPTY_WHITELIST = "empty_whitelist"


def rule_key(pattern: str) -> str:
    return normalize_separators(pattern.strip())


@dataclass
class Rule:
    pattern: str
    checked: bool = True
    category: RuleCategory = RuleCategory.CUSTOM

    def as_dict(self) -> dict[str, Any]:
        return {
            "pattern": self.pattern,
            "checked": self.checked,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Rule":
        return cls(
            pattern=rule_key(str(payload["pattern"])),
            checked=bool(payload.get("checked", True)),
            category=RuleCategory(payload.get("category", RuleCategory.CUSTOM.value)),
        )


class RuleCollection:
    """Rules of one mode, unique by normalized pattern, in insertion order."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.add(rule.pattern, rule.category, checked=rule.checked)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules.values())

    def get(self, pattern: str) -> Optional[Rule]:
        return self._rules.get(rule_key(pattern))

    def add(
        self, pattern: str, category: RuleCategory, checked: bool = True
    ) -> Rule:
        key = rule_key(pattern)
        existing = self._rules.get(key)
        if existing is not None:
            existing.checked = checked
            existing.category = category
            return existing
        rule = Rule(pattern=key, checked=checked, category=category)
        self._rules[key] = rule
        return rule

    def remove(self, pattern: str) -> bool:
        return self._rules.pop(rule_key(pattern), None) is not None

    def set_checked(self, pattern: str, checked: bool) -> Optional[Rule]:
        rule = self.get(pattern)
        if rule is not None:
            rule.checked = checked
        return rule

    def set_all(self, checked: bool) -> int:
        for rule in self._rules.values():
            rule.checked = checked
        return len(self._rules)

    def replace_categories(
        self, categories: Iterable[RuleCategory], rules: Iterable[Rule]
    ) -> None:
        dropped = set(categories)
        self._rules = {
            key: rule
            for key, rule in self._rules.items()
            if rule.category not in dropped
        }
        for rule in rules:
            self.add(rule.pattern, rule.category, checked=rule.checked)

    def by_category(self, category: RuleCategory) -> list[Rule]:
        return sorted(
            (rule for rule in self._rules.values() if rule.category == category),
            key=lambda item: item.pattern,
        )

    def checked_patterns(self) -> list[str]:
        return [rule.pattern for rule in self._rules.values() if rule.checked]

    def as_list(self) -> list[dict[str, Any]]:
        return [rule.as_dict() for rule in self._rules.values()]


@dataclass
class SessionState:
    mode: Mode = Mode.EXCLUDE
    exclude: RuleCollection = field(default_factory=RuleCollection)
    include: RuleCollection = field(default_factory=RuleCollection)
    template_name: Optional[str] = None

    def collection(self, mode: Optional[Mode] = None) -> RuleCollection:
        selected = mode or self.mode
        return self.include if selected == Mode.INCLUDE else self.exclude

    def as_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "template_name": self.template_name,
            "collections": {
                Mode.EXCLUDE.value: self.exclude.as_list(),
                Mode.INCLUDE.value: self.include.as_list(),
            },
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SessionState":
        collections = payload.get("collections", {}) or {}
        template_name = payload.get("template_name")
        return cls(
            mode=Mode(payload.get("mode", Mode.EXCLUDE.value)),
            exclude=RuleCollection(
                Rule.from_dict(item) for item in collections.get(Mode.EXCLUDE.value, [])
            ),
            include=RuleCollection(
                Rule.from_dict(item) for item in collections.get(Mode.INCLUDE.value, [])
            ),
            template_name=str(template_name) if template_name else None,
        )


@dataclass(frozen=True)
class TemplateRules:
    name: str
    rules: list[str]

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "rules": list(self.rules)}


@dataclass(frozen=True)
class LoadedRules:
    local: list[str]
    template: TemplateRules

    def as_dict(self) -> dict[str, Any]:
        return {"local": list(self.local), "template": self.template.as_dict()}


@dataclass(frozen=True)
class GenerationRequest:
    selected_rules: list[str]
    mode: Mode
    confirmed: bool = False


@dataclass(frozen=True)
class ResolvedPatterns:
    patterns: list[str]
    status: ResolutionStatus
    truncated_rules: list[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.status == ResolutionStatus.READY


@dataclass
class WalkStats:
    directories: int = 0
    files: int = 0
    binary_files: int = 0
    read_errors: int = 0


@dataclass
class GenerationResult:
    status: GenerationStatus
    mode: Mode
    patterns: list[str]
    output_path: Optional[Path] = None
    stats: WalkStats = field(default_factory=WalkStats)
    truncated_rules: list[str] = field(default_factory=list)

    @property
    def written(self) -> bool:
        return self.status == GenerationStatus.WRITTEN

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "mode": self.mode.value,
            "patterns": list(self.patterns),
            "output_path": str(self.output_path) if self.output_path else None,
            "directories": self.stats.directories,
            "files": self.stats.files,
            "binary_files": self.stats.binary_files,
            "read_errors": self.stats.read_errors,
            "truncated_rules": list(self.truncated_rules),
        }
