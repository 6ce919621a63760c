"""
Gitignore-style evaluation of an ordered pattern list.

Each pattern is compiled on its own with pathspec; ordering, negation and
directory handling follow git's per-entry rules: the last pattern that
matches an entry decides, and an entry below an excluded directory is
excluded as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import pathspec

from code_context.log import get_logger

logger = get_logger(__name__)

_RECURSIVE_PREFIX = "**/"
_RECURSIVE_SUFFIX = "/**"


@dataclass(frozen=True)
class CompiledPattern:
    source: str
    spec: pathspec.PathSpec
    negated: bool
    directory_only: bool
    basename: bool
    recursive: bool

    def matches(self, path: str, name: str, is_directory: bool) -> bool:
        if self.directory_only and not is_directory:
            return False
        if self.basename:
            return self.spec.match_file(f"{name}/" if is_directory else name)

        candidate = f"{path}/" if is_directory else path
        if not self.spec.match_file(candidate):
            return False
        if self.recursive:
            return True
        # pathspec also matches descendants of a matching directory; only
        # keep matches against the entry itself.
        parent = path.rpartition("/")[0]
        return not parent or not self.spec.match_file(f"{parent}/")


def _strip_pattern(pattern: str) -> str:
    text = pattern.lstrip()
    # an escaped trailing space is part of the name
    while text.endswith(" ") and not text.endswith("\\ "):
        text = text[:-1]
    return text


def compile_pattern(pattern: str) -> Optional[CompiledPattern]:
    text = _strip_pattern(pattern)
    if not text or text.startswith("#"):
        return None

    negated = text.startswith("!")
    body = text[1:] if negated else text
    if not body or body == "/":
        return None

    directory_only = body.endswith("/")
    stem = body.rstrip("/")
    if stem.startswith(_RECURSIVE_PREFIX) and "/" not in stem[len(_RECURSIVE_PREFIX):]:
        stem = stem[len(_RECURSIVE_PREFIX):]
        body = f"{stem}/" if directory_only else stem
    basename = "/" not in stem

    try:
        spec = pathspec.PathSpec.from_lines("gitwildmatch", [body])
    except ValueError as exc:
        logger.warning("Skipping invalid pattern %r: %s", pattern, exc)
        return None

    return CompiledPattern(
        source=text,
        spec=spec,
        negated=negated,
        directory_only=directory_only,
        basename=basename,
        recursive=stem.endswith(_RECURSIVE_SUFFIX) or stem == "**",
    )


class PatternMatcher:
    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: list[CompiledPattern] = []
        self._directory_cache: dict[str, bool] = {}
        self.add(patterns)

    @property
    def patterns(self) -> list[str]:
        return [item.source for item in self._patterns]

    def add(self, patterns: Iterable[str] | str) -> "PatternMatcher":
        if isinstance(patterns, str):
            patterns = patterns.splitlines()
        for pattern in patterns:
            compiled = compile_pattern(pattern)
            if compiled is not None:
                self._patterns.append(compiled)
        self._directory_cache.clear()
        return self

    def matches(self, path: str, is_directory: bool = False) -> bool:
        """Return True when the project-relative, slash-separated ``path`` is excluded.

        A trailing slash on ``path`` also marks it as a directory.
        """
        normalized = path.strip("/")
        if not normalized:
            return False
        is_directory = is_directory or path.endswith("/")

        parent = normalized.rpartition("/")[0]
        if parent and self._directory_excluded(parent):
            return True
        return self._decide(normalized, is_directory)

    def filter(self, paths: Iterable[str]) -> list[str]:
        return [path for path in paths if not self.matches(path)]

    def _directory_excluded(self, path: str) -> bool:
        cached = self._directory_cache.get(path)
        if cached is not None:
            return cached
        parent = path.rpartition("/")[0]
        excluded = bool(parent) and self._directory_excluded(parent)
        if not excluded:
            excluded = self._decide(path, True)
        self._directory_cache[path] = excluded
        return excluded

    def _decide(self, path: str, is_directory: bool) -> bool:
        name = path.rpartition("/")[2]
        excluded = False
        for compiled in self._patterns:
            if compiled.matches(path, name, is_directory):
                excluded = not compiled.negated
        return excluded
