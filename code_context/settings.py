"""User and project settings, read from YAML and validated against a schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from code_context.constants import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXCLUDE_FILES,
    DEFAULT_SEARCH_EXCLUDE,
    OUTPUT_FILENAME,
    PROJECT_SETTINGS_FILENAME,
    SEARCH_MATCH_LIMIT,
    USER_SETTINGS_FILENAME,
)
from code_context.errors import InvalidSettingsError
from code_context.rules.repository import default_config_root
from code_context.utils import format_schema_error

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

SETTINGS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "exclude_dirs": _STRING_LIST,
        "exclude_files": _STRING_LIST,
        "output_file": {"type": "string", "minLength": 1},
        "search_limit": {"type": "integer", "minimum": 1, "maximum": SEARCH_MATCH_LIMIT},
        "search_exclude": _STRING_LIST,
    },
}

_VALIDATOR = Draft202012Validator(SETTINGS_SCHEMA)


@dataclass(frozen=True)
class Settings:
    exclude_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    exclude_files: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_FILES))
    output_file: str = OUTPUT_FILENAME
    search_limit: int = SEARCH_MATCH_LIMIT
    search_exclude: list[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_EXCLUDE))

    def output_path(self, project_root: Path) -> Path:
        return project_root / self.output_file

    def merged(self, overrides: dict[str, Any]) -> "Settings":
        values = {
            "exclude_dirs": self.exclude_dirs,
            "exclude_files": self.exclude_files,
            "output_file": self.output_file,
            "search_limit": self.search_limit,
            "search_exclude": self.search_exclude,
        }
        values.update(overrides)
        return Settings(**values)


class SettingsRepository:
    def __init__(self, config_root: Path | None = None) -> None:
        self._config_root = config_root or default_config_root()

    @property
    def user_settings_path(self) -> Path:
        return self._config_root / USER_SETTINGS_FILENAME

    def project_settings_path(self, project_root: Path) -> Path:
        return project_root / PROJECT_SETTINGS_FILENAME

    def load(self, project_root: Path | None = None) -> Settings:
        settings = Settings()
        settings = settings.merged(self._read(self.user_settings_path))
        if project_root is not None:
            settings = settings.merged(self._read(self.project_settings_path(project_root)))
        return settings

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise InvalidSettingsError(path, f"YAML parse error: {exc}") from exc
        if payload is None:
            return {}
        error = next(iter(_VALIDATOR.iter_errors(payload)), None)
        if error is not None:
            raise InvalidSettingsError(path, format_schema_error(error))
        return payload
