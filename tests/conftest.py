import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setattr(Path, "home", lambda: home)


@pytest.fixture(autouse=True)
def no_network(monkeypatch) -> None:
    from urllib.error import URLError

    def _offline(*_args: Any, **_kwargs: Any):
        raise URLError("network disabled in tests")

    monkeypatch.setattr("code_context.templates.urlopen", _offline)
    from code_context.templates import clear_template_cache

    clear_template_cache()


@pytest.fixture
def write_file():
    def _write(path: Path, content: str | bytes = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def sample_project(project_root: Path, write_file) -> Path:
    write_file(project_root / "src" / "a.ts", "const a = 1;")
    write_file(project_root / "node_modules" / "x.js", "module.exports = {};")
    write_file(project_root / ".git" / "config", "[core]\n")
    return project_root


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    home = tmp_path / "home"

    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(home))
            env.setdefault("XDG_CONFIG_HOME", str(home / ".config"))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
