import json
from pathlib import Path

from code_context.utils import (
    compact_home_path,
    path_digest,
    read_json_safe,
    relative_posix,
    write_json,
)


# --- read_json_safe ---


def test_read_json_safe_file_missing(tmp_path: Path) -> None:
    result, error = read_json_safe(tmp_path / "missing.json")

    assert result is None
    assert error is None


def test_read_json_safe_file_empty(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")

    assert read_json_safe(path) == (None, None)


def test_read_json_safe_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{nope", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert error is not None


def test_write_json_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"

    write_json(path, {"mode": "include"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"mode": "include"}
    assert path.read_text(encoding="utf-8").endswith("\n")


# --- paths ---


def test_relative_posix_inside_and_outside(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()

    assert relative_posix(root / "a" / "b.txt", root) == "a/b.txt"
    assert relative_posix(tmp_path / "elsewhere.txt", root) is None


def test_path_digest_is_stable(tmp_path: Path) -> None:
    (tmp_path / "x").mkdir()

    assert path_digest(tmp_path) == path_digest(tmp_path / "x" / "..")
    assert len(path_digest(tmp_path)) == 16
    assert path_digest(tmp_path) != path_digest(tmp_path / "other")


def test_compact_home_path() -> None:
    home = Path.home()

    assert compact_home_path(home) == "~"
    assert compact_home_path(home / "proj" / "ctx.txt") == "~/proj/ctx.txt"
    assert compact_home_path("/opt/other") == "/opt/other"
