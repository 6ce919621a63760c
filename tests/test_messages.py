"""Tests for tagged request parsing and SessionController dispatch."""

from pathlib import Path

import pytest

from code_context.errors import InvalidRequestError
from code_context.generator import ContextGenerator
from code_context.messages import (
    AddRuleRequest,
    GenerateRequest,
    LoadRulesRequest,
    SessionController,
    SetModeRequest,
    ToggleRuleRequest,
    parse_request,
)
from code_context.models import Mode, SessionState
from code_context.session import SessionService
from code_context.settings import Settings
from code_context.templates import ITemplateSource


class StaticTemplates(ITemplateSource):
    def list_templates(self) -> list[str]:
        return ["Node", "Python"]

    def get_template_content(self, name: str) -> str:
        return "*.log\n" if name == "Node" else ""


@pytest.fixture
def controller(sample_project: Path) -> SessionController:
    settings = Settings(exclude_dirs=["node_modules"], exclude_files=[])
    session = SessionService(
        sample_project, SessionState(), settings=settings, templates=StaticTemplates()
    )
    return SessionController(
        session, ContextGenerator(sample_project, settings=settings), StaticTemplates()
    )


def test_parse_request_builds_typed_requests() -> None:
    assert parse_request({"type": "load-rules"}) == LoadRulesRequest()
    assert parse_request({"type": "add-rule", "pattern": "dist/", "mode": "include"}) == (
        AddRuleRequest("dist/", Mode.INCLUDE)
    )
    assert parse_request({"type": "toggle-rule", "pattern": "x"}) == ToggleRuleRequest("x")
    assert parse_request({"type": "set-mode", "mode": "exclude"}) == SetModeRequest(Mode.EXCLUDE)
    assert parse_request(
        {"type": "generate", "selectedRules": ["a"], "mode": "include"}
    ) == GenerateRequest(["a"], Mode.INCLUDE, False)


@pytest.mark.parametrize(
    "payload",
    [
        ["load-rules"],
        {"type": "explode"},
        {"pattern": "x"},
        {"type": "add-rule"},
        {"type": "add-rule", "pattern": ""},
        {"type": "set-mode", "mode": "sideways"},
        {"type": "generate", "selectedRules": "a", "mode": "exclude"},
        {"type": "list-templates", "extra": True},
    ],
)
def test_parse_request_rejects_bad_payloads(payload) -> None:
    with pytest.raises(InvalidRequestError):
        parse_request(payload)


def test_load_rules_response(controller: SessionController) -> None:
    response = controller.handle({"type": "load-rules", "template": "Node"})

    assert response["type"] == "rules"
    assert response["mode"] == "exclude"
    assert response["local"] == ["node_modules/"]
    assert response["template"] == {"name": "Node", "rules": ["*.log"]}
    assert [item["pattern"] for item in response["collection"]] == ["node_modules/", "*.log"]


def test_add_and_toggle_rule(controller: SessionController) -> None:
    added = controller.handle({"type": "add-rule", "pattern": ".env"})
    toggled = controller.handle({"type": "toggle-rule", "pattern": "*.env"})

    assert added == {
        "type": "rule",
        "rule": {"pattern": "*.env", "checked": True, "category": "custom"},
    }
    assert toggled["rule"]["checked"] is False


def test_remove_missing_rule_warns(controller: SessionController) -> None:
    response = controller.handle({"type": "remove-rule", "pattern": "nope"})

    assert response["type"] == "warning"


def test_toggle_missing_rule_is_error(controller: SessionController) -> None:
    response = controller.handle({"type": "toggle-rule", "pattern": "nope"})

    assert response["type"] == "error"
    assert "Rule not found" in response["message"]


def test_invalid_request_is_error_response(controller: SessionController) -> None:
    response = controller.handle({"type": "nonsense"})

    assert response["type"] == "error"
    assert "unknown request type" in response["message"]


def test_set_mode_and_select_all(controller: SessionController) -> None:
    controller.handle({"type": "add-rule", "pattern": "src/", "mode": "include"})

    controller.handle({"type": "set-mode", "mode": "include"})
    response = controller.handle({"type": "select-all", "checked": False})

    assert response["mode"] == "include"
    assert response["collection"] == [
        {"pattern": "src/", "checked": False, "category": "custom"}
    ]


def test_list_templates_includes_suggestions(
    controller: SessionController, sample_project: Path
) -> None:
    (sample_project / "package.json").write_text("{}", encoding="utf-8")

    response = controller.handle({"type": "list-templates"})

    assert response == {"type": "templates", "templates": ["Node", "Python"], "suggested": ["Node"]}


def test_generate_needs_confirmation(controller: SessionController) -> None:
    response = controller.handle({"type": "generate", "selectedRules": [], "mode": "exclude"})

    assert response["type"] == "warning"
    assert response["status"] == "needs_confirmation"


def test_generate_empty_whitelist(controller: SessionController) -> None:
    response = controller.handle({"type": "generate", "selectedRules": [], "mode": "include"})

    assert response["type"] == "warning"
    assert response["status"] == "empty_whitelist"


def test_generate_writes_file(controller: SessionController, sample_project: Path) -> None:
    response = controller.handle(
        {"type": "generate", "selectedRules": ["node_modules/"], "mode": "exclude"}
    )

    assert response["type"] == "generated"
    assert response["status"] == "written"
    assert (sample_project / "ProjectContext.txt").is_file()
