"""Per-project session persistence."""

from __future__ import annotations

from pathlib import Path

from code_context.constants import APP_NAME, SESSIONS_DIRNAME
from code_context.log import get_logger
from code_context.models import SessionState
from code_context.utils import path_digest, read_json_safe, write_json

logger = get_logger(__name__)


def default_config_root() -> Path:
    return Path.home() / ".config" / APP_NAME


class SessionRepository:
    def __init__(self, root: Path | None = None) -> None:
        self._root = root or default_config_root()

    @property
    def sessions_dir(self) -> Path:
        return self._root / SESSIONS_DIRNAME

    def session_path(self, project_root: Path) -> Path:
        return self.sessions_dir / f"{path_digest(project_root)}.json"

    def load(self, project_root: Path) -> SessionState:
        path = self.session_path(project_root)
        payload, error = read_json_safe(path)
        if error is not None:
            logger.warning("Ignoring unreadable session file %s: %s", path, error)
            return SessionState()
        if not isinstance(payload, dict):
            return SessionState()
        try:
            return SessionState.from_dict(payload)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed session file %s: %s", path, exc)
            return SessionState()

    def save(self, project_root: Path, state: SessionState) -> Path:
        path = self.session_path(project_root)
        payload = state.as_dict()
        payload["project_root"] = str(project_root.resolve())
        write_json(path, payload)
        return path

    def clear(self, project_root: Path) -> bool:
        path = self.session_path(project_root)
        if not path.exists():
            return False
        path.unlink()
        return True
