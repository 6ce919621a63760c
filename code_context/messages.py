"""
Tagged request/response messages exchanged between a rules panel and the host.

Every request is a JSON object with a ``type`` tag; the payload shape is
fixed per tag and validated before dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from jsonschema import Draft202012Validator

from code_context.errors import ContextAppError, InvalidRequestError
from code_context.generator import ContextGenerator
from code_context.models import GenerationRequest, GenerationStatus, Mode
from code_context.session import SessionService
from code_context.templates import ITemplateSource, detect_project_types
from code_context.utils import format_schema_error


class RequestKind(str, Enum):
    LOAD_RULES = "load-rules"
    ADD_RULE = "add-rule"
    REMOVE_RULE = "remove-rule"
    TOGGLE_RULE = "toggle-rule"
    SELECT_ALL = "select-all"
    SET_MODE = "set-mode"
    LIST_TEMPLATES = "list-templates"
    GENERATE = "generate"


class ResponseKind(str, Enum):
    RULES = "rules"
    RULE = "rule"
    TEMPLATES = "templates"
    GENERATED = "generated"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LoadRulesRequest:
    template: Optional[str] = None


@dataclass(frozen=True)
class AddRuleRequest:
    pattern: str
    mode: Optional[Mode] = None


@dataclass(frozen=True)
class RemoveRuleRequest:
    pattern: str
    mode: Optional[Mode] = None


@dataclass(frozen=True)
class ToggleRuleRequest:
    pattern: str
    checked: Optional[bool] = None
    mode: Optional[Mode] = None


@dataclass(frozen=True)
class SelectAllRequest:
    checked: bool
    mode: Optional[Mode] = None


@dataclass(frozen=True)
class SetModeRequest:
    mode: Mode


@dataclass(frozen=True)
class ListTemplatesRequest:
    pass


@dataclass(frozen=True)
class GenerateRequest:
    selected_rules: list[str]
    mode: Mode
    confirmed: bool = False


Request = Union[
    LoadRulesRequest,
    AddRuleRequest,
    RemoveRuleRequest,
    ToggleRuleRequest,
    SelectAllRequest,
    SetModeRequest,
    ListTemplatesRequest,
    GenerateRequest,
]

_MODE = {"type": "string", "enum": [mode.value for mode in Mode]}
_PATTERN = {"type": "string", "minLength": 1}


def _schema(properties: dict[str, Any], required: tuple[str, ...] = ()) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {"type": {"type": "string"}, **properties},
        "required": ["type", *required],
        "additionalProperties": False,
    }


REQUEST_SCHEMAS: dict[RequestKind, dict[str, Any]] = {
    RequestKind.LOAD_RULES: _schema({"template": {"type": ["string", "null"]}}),
    RequestKind.ADD_RULE: _schema({"pattern": _PATTERN, "mode": _MODE}, ("pattern",)),
    RequestKind.REMOVE_RULE: _schema({"pattern": _PATTERN, "mode": _MODE}, ("pattern",)),
    RequestKind.TOGGLE_RULE: _schema(
        {"pattern": _PATTERN, "checked": {"type": "boolean"}, "mode": _MODE},
        ("pattern",),
    ),
    RequestKind.SELECT_ALL: _schema(
        {"checked": {"type": "boolean"}, "mode": _MODE}, ("checked",)
    ),
    RequestKind.SET_MODE: _schema({"mode": _MODE}, ("mode",)),
    RequestKind.LIST_TEMPLATES: _schema({}),
    RequestKind.GENERATE: _schema(
        {
            "selectedRules": {"type": "array", "items": {"type": "string"}},
            "mode": _MODE,
            "confirmed": {"type": "boolean"},
        },
        ("selectedRules", "mode"),
    ),
}

_VALIDATORS = {kind: Draft202012Validator(schema) for kind, schema in REQUEST_SCHEMAS.items()}


def _mode(value: Any) -> Optional[Mode]:
    return Mode(value) if value is not None else None


def parse_request(payload: Any) -> Request:
    if not isinstance(payload, dict):
        raise InvalidRequestError("request must be a JSON object")
    try:
        kind = RequestKind(payload.get("type"))
    except ValueError:
        raise InvalidRequestError(f"unknown request type {payload.get('type')!r}") from None

    error = next(iter(_VALIDATORS[kind].iter_errors(payload)), None)
    if error is not None:
        raise InvalidRequestError(format_schema_error(error))

    if kind == RequestKind.LOAD_RULES:
        return LoadRulesRequest(template=payload.get("template"))
    if kind == RequestKind.ADD_RULE:
        return AddRuleRequest(payload["pattern"], _mode(payload.get("mode")))
    if kind == RequestKind.REMOVE_RULE:
        return RemoveRuleRequest(payload["pattern"], _mode(payload.get("mode")))
    if kind == RequestKind.TOGGLE_RULE:
        return ToggleRuleRequest(
            payload["pattern"], payload.get("checked"), _mode(payload.get("mode"))
        )
    if kind == RequestKind.SELECT_ALL:
        return SelectAllRequest(payload["checked"], _mode(payload.get("mode")))
    if kind == RequestKind.SET_MODE:
        return SetModeRequest(Mode(payload["mode"]))
    if kind == RequestKind.LIST_TEMPLATES:
        return ListTemplatesRequest()
    return GenerateRequest(
        selected_rules=list(payload["selectedRules"]),
        mode=Mode(payload["mode"]),
        confirmed=bool(payload.get("confirmed", False)),
    )


class SessionController:
    def __init__(
        self,
        session: SessionService,
        generator: ContextGenerator,
        templates: ITemplateSource | None = None,
    ) -> None:
        self._session = session
        self._generator = generator
        self._templates = templates
        self._handlers: dict[type, Callable[[Any], dict[str, Any]]] = {
            LoadRulesRequest: self._load_rules,
            AddRuleRequest: self._add_rule,
            RemoveRuleRequest: self._remove_rule,
            ToggleRuleRequest: self._toggle_rule,
            SelectAllRequest: self._select_all,
            SetModeRequest: self._set_mode,
            ListTemplatesRequest: self._list_templates,
            GenerateRequest: self._generate,
        }

    def handle(self, payload: Any) -> dict[str, Any]:
        try:
            request = parse_request(payload)
            return self._handlers[type(request)](request)
        except ContextAppError as exc:
            return {"type": ResponseKind.ERROR.value, "message": str(exc)}

    def rules_response(self) -> dict[str, Any]:
        state = self._session.state
        response = {"type": ResponseKind.RULES.value, "mode": state.mode.value}
        response.update(self._session.current_rules().as_dict())
        response["collection"] = state.collection().as_list()
        return response

    def _load_rules(self, request: LoadRulesRequest) -> dict[str, Any]:
        self._session.load_rules(request.template)
        return self.rules_response()

    def _add_rule(self, request: AddRuleRequest) -> dict[str, Any]:
        rule = self._session.add_rule(request.pattern, request.mode)
        return {"type": ResponseKind.RULE.value, "rule": rule.as_dict()}

    def _remove_rule(self, request: RemoveRuleRequest) -> dict[str, Any]:
        if not self._session.remove_rule(request.pattern, request.mode):
            return {
                "type": ResponseKind.WARNING.value,
                "message": f"Rule not found: {request.pattern}",
            }
        return self.rules_response()

    def _toggle_rule(self, request: ToggleRuleRequest) -> dict[str, Any]:
        rule = self._session.toggle_rule(request.pattern, request.checked, request.mode)
        return {"type": ResponseKind.RULE.value, "rule": rule.as_dict()}

    def _select_all(self, request: SelectAllRequest) -> dict[str, Any]:
        self._session.select_all(request.checked, request.mode)
        return self.rules_response()

    def _set_mode(self, request: SetModeRequest) -> dict[str, Any]:
        self._session.set_mode(request.mode)
        return self.rules_response()

    def _list_templates(self, _request: ListTemplatesRequest) -> dict[str, Any]:
        names = self._templates.list_templates() if self._templates is not None else []
        return {
            "type": ResponseKind.TEMPLATES.value,
            "templates": names,
            "suggested": detect_project_types(self._session.project_root),
        }

    def _generate(self, request: GenerateRequest) -> dict[str, Any]:
        result = self._generator.generate(
            GenerationRequest(
                selected_rules=request.selected_rules,
                mode=request.mode,
                confirmed=request.confirmed,
            )
        )
        if result.status == GenerationStatus.NEEDS_CONFIRMATION:
            return {
                "type": ResponseKind.WARNING.value,
                "status": result.status.value,
                "message": "No exclusion rules selected; every file will be included. "
                "Resend with confirmed=true to proceed.",
            }
        if result.status == GenerationStatus.EMPTY_WHITELIST:
            return {
                "type": ResponseKind.WARNING.value,
                "status": result.status.value,
                "message": "No include rules selected; nothing was generated.",
            }
        return {"type": ResponseKind.GENERATED.value, **result.as_dict()}
