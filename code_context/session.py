"""Operations over an explicit per-project session state."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from code_context.constants import GITIGNORE_FILENAME
from code_context.errors import InvalidRuleError
from code_context.log import get_logger
from code_context.models import (
    GenerationRequest,
    LoadedRules,
    Mode,
    Rule,
    RuleCategory,
    SessionState,
)
from code_context.rules.parser import directory_patterns, format_custom_rule, parse_ignore_lines
from code_context.rules.ruleset import build_rule_set, loaded_rules_to_rules
from code_context.settings import Settings
from code_context.templates import ITemplateSource

logger = get_logger(__name__)

_LOADED_CATEGORIES = (RuleCategory.LOCAL, RuleCategory.TEMPLATE)


class SessionService:
    def __init__(
        self,
        project_root: Path,
        state: SessionState,
        settings: Settings | None = None,
        templates: ITemplateSource | None = None,
    ) -> None:
        self.project_root = project_root
        self.state = state
        self.settings = settings or Settings()
        self._templates = templates

    def local_lines(self) -> list[str]:
        gitignore = self.project_root / GITIGNORE_FILENAME
        text = None
        if gitignore.is_file():
            try:
                text = gitignore.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.warning("Could not read %s: %s", gitignore, exc)
        lines = parse_ignore_lines(text)
        lines.extend(directory_patterns(self.settings.exclude_dirs))
        lines.extend(parse_ignore_lines("\n".join(self.settings.exclude_files)))
        return lines

    def template_lines(self, template_name: Optional[str]) -> list[str]:
        if not template_name or self._templates is None:
            return []
        return parse_ignore_lines(self._templates.get_template_content(template_name))

    def load_rules(self, template_name: Optional[str] = None) -> LoadedRules:
        template_lines = self.template_lines(template_name)
        if template_name and not template_lines:
            logger.warning("Template %s is unavailable; using local rules only", template_name)
        loaded = build_rule_set(
            self.local_lines(),
            template_lines,
            template_name=template_name if template_lines else "",
        )
        self.state.exclude.replace_categories(_LOADED_CATEGORIES, loaded_rules_to_rules(loaded))
        self.state.template_name = loaded.template.name or None
        return loaded

    def current_rules(self) -> LoadedRules:
        exclude = self.state.exclude
        return build_rule_set(
            [rule.pattern for rule in exclude.by_category(RuleCategory.LOCAL)],
            [rule.pattern for rule in exclude.by_category(RuleCategory.TEMPLATE)],
            template_name=self.state.template_name or "",
        )

    def add_rule(self, pattern: str, mode: Optional[Mode] = None) -> Rule:
        formatted = format_custom_rule(pattern)
        if not formatted:
            raise InvalidRuleError(pattern, "Rule must not be empty")
        return self.state.collection(mode).add(formatted, RuleCategory.CUSTOM)

    def remove_rule(self, pattern: str, mode: Optional[Mode] = None) -> bool:
        return self.state.collection(mode).remove(pattern)

    def toggle_rule(
        self, pattern: str, checked: Optional[bool] = None, mode: Optional[Mode] = None
    ) -> Rule:
        collection = self.state.collection(mode)
        rule = collection.get(pattern)
        if rule is None:
            raise InvalidRuleError(pattern, "Rule not found")
        collection.set_checked(pattern, (not rule.checked) if checked is None else checked)
        return rule

    def select_all(self, checked: bool, mode: Optional[Mode] = None) -> int:
        return self.state.collection(mode).set_all(checked)

    def import_rules(self, path: Path, mode: Optional[Mode] = None) -> list[Rule]:
        text = path.read_text(encoding="utf-8", errors="replace")
        collection = self.state.collection(mode)
        return [
            collection.add(line, RuleCategory.IMPORTED)
            for line in parse_ignore_lines(text)
        ]

    def set_mode(self, mode: Mode) -> Mode:
        self.state.mode = mode
        return mode

    def generation_request(
        self, mode: Optional[Mode] = None, confirmed: bool = False
    ) -> GenerationRequest:
        selected = mode or self.state.mode
        return GenerationRequest(
            selected_rules=self.state.collection(selected).checked_patterns(),
            mode=selected,
            confirmed=confirmed,
        )
