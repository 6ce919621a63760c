"""Tests for SessionService rule operations."""

from pathlib import Path

import pytest

from code_context.errors import InvalidRuleError
from code_context.models import Mode, RuleCategory, SessionState
from code_context.session import SessionService
from code_context.settings import Settings
from code_context.templates import ITemplateSource


class StaticTemplates(ITemplateSource):
    def __init__(self, templates: dict[str, str]) -> None:
        self.templates = templates

    def list_templates(self) -> list[str]:
        return sorted(self.templates)

    def get_template_content(self, name: str) -> str:
        return self.templates.get(name, "")


def _service(root: Path, **kwargs) -> SessionService:
    return SessionService(root, SessionState(), **kwargs)


def test_local_lines_merge_gitignore_and_settings(project_root: Path, write_file) -> None:
    write_file(project_root / ".gitignore", "# build\ndist/\n\n*.log\n")
    service = _service(
        project_root, settings=Settings(exclude_dirs=["node_modules"], exclude_files=["x.lock"])
    )

    assert service.local_lines() == ["dist/", "*.log", "node_modules/", "x.lock"]


def test_load_rules_without_template(project_root: Path, write_file) -> None:
    write_file(project_root / ".gitignore", "node_modules/\n")
    service = _service(project_root, settings=Settings(exclude_dirs=[], exclude_files=[]))

    loaded = service.load_rules()

    assert loaded.local == ["node_modules/"]
    assert loaded.template.rules == []
    assert service.state.exclude.checked_patterns() == ["node_modules/"]
    assert service.state.template_name is None


def test_load_rules_dedupes_template_against_local(project_root: Path, write_file) -> None:
    write_file(project_root / ".gitignore", "node_modules/\n")
    service = _service(
        project_root,
        settings=Settings(exclude_dirs=[], exclude_files=[]),
        templates=StaticTemplates({"Node": "node_modules/\n*.log\n"}),
    )

    loaded = service.load_rules("Node")

    assert loaded.template.name == "Node"
    assert loaded.template.rules == ["*.log"]
    assert service.state.exclude.get("*.log").category == RuleCategory.TEMPLATE
    assert service.state.template_name == "Node"


def test_unavailable_template_falls_back_to_local(project_root: Path) -> None:
    service = _service(project_root, templates=StaticTemplates({}))

    loaded = service.load_rules("Missing")

    assert loaded.template.name == ""
    assert loaded.template.rules == []
    assert "node_modules/" in loaded.local


def test_reload_keeps_custom_rules(project_root: Path, write_file) -> None:
    service = _service(project_root, settings=Settings(exclude_dirs=["vendor"], exclude_files=[]))
    service.load_rules()
    service.add_rule("secrets/")

    service.settings = Settings(exclude_dirs=["build"], exclude_files=[])
    service.load_rules()

    patterns = [rule.pattern for rule in service.state.exclude.rules]
    assert "secrets/" in patterns
    assert "build/" in patterns
    assert "vendor/" not in patterns


def test_add_rule_formats_extension_shorthand(project_root: Path) -> None:
    service = _service(project_root)

    rule = service.add_rule(".log")

    assert rule.pattern == "*.log"
    assert rule.category == RuleCategory.CUSTOM
    assert rule.checked is True


def test_add_rule_targets_requested_mode(project_root: Path) -> None:
    service = _service(project_root)

    service.add_rule("src/", Mode.INCLUDE)

    assert service.state.include.checked_patterns() == ["src/"]
    assert len(service.state.exclude) == 0


def test_add_empty_rule_rejected(project_root: Path) -> None:
    with pytest.raises(InvalidRuleError):
        _service(project_root).add_rule("   ")


def test_remove_rule(project_root: Path) -> None:
    service = _service(project_root)
    service.add_rule("dist/")

    assert service.remove_rule("dist/") is True
    assert service.remove_rule("dist/") is False


def test_toggle_rule_flips_and_sets(project_root: Path) -> None:
    service = _service(project_root)
    service.add_rule("dist/")

    assert service.toggle_rule("dist/").checked is False
    assert service.toggle_rule("dist/").checked is True
    assert service.toggle_rule("dist/", checked=True).checked is True


def test_toggle_unknown_rule_rejected(project_root: Path) -> None:
    with pytest.raises(InvalidRuleError):
        _service(project_root).toggle_rule("nope")


def test_select_all(project_root: Path) -> None:
    service = _service(project_root)
    service.add_rule("a/")
    service.add_rule("b/")

    assert service.select_all(False) == 2
    assert service.state.exclude.checked_patterns() == []


def test_import_rules(project_root: Path, tmp_path: Path, write_file) -> None:
    source = write_file(tmp_path / "rules.ignore", "# comment\n*.tmp\ncache/\n")
    service = _service(project_root)

    imported = service.import_rules(source, Mode.INCLUDE)

    assert [rule.pattern for rule in imported] == ["*.tmp", "cache/"]
    assert all(rule.category == RuleCategory.IMPORTED for rule in imported)
    assert service.state.include.checked_patterns() == ["*.tmp", "cache/"]


def test_generation_request_uses_active_mode(project_root: Path) -> None:
    service = _service(project_root)
    service.add_rule("src/", Mode.INCLUDE)
    service.add_rule("dist/", Mode.EXCLUDE)
    service.toggle_rule("dist/")
    service.set_mode(Mode.INCLUDE)

    request = service.generation_request()

    assert request.mode == Mode.INCLUDE
    assert request.selected_rules == ["src/"]
    assert service.generation_request(Mode.EXCLUDE, confirmed=True).selected_rules == []
