"""Expand include-mode rules into the unignore patterns that make them reachable."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from code_context.constants import DEFAULT_SEARCH_EXCLUDE, SEARCH_MATCH_LIMIT
from code_context.filesystem import IFileSystem, LocalFileSystem
from code_context.log import get_logger
from code_context.rules.parser import format_custom_rule
from code_context.search import IFileSearch, WorkspaceFileSearch

logger = get_logger(__name__)

_GLOB_SPECIAL = frozenset("[]*?\\")


@dataclass
class PathResolution:
    rule: str
    patterns: list[str] = field(default_factory=list)
    matches: list[str] = field(default_factory=list)
    truncated: bool = False


def include_rule(raw_rule: str) -> str:
    """Strip a leading ``!`` and apply custom-rule formatting; empty means no rule."""
    rule = raw_rule.strip()
    if rule.startswith("!"):
        rule = rule[1:]
    return format_custom_rule(rule)


def escape_segment(name: str) -> str:
    """Escape one path segment so gitignore matching treats it literally."""
    escaped = "".join(f"\\{char}" if char in _GLOB_SPECIAL else char for char in name)
    if escaped[:1] in ("#", "!"):
        escaped = f"\\{escaped}"
    trimmed = escaped.rstrip(" ")
    return trimmed + "\\ " * (len(escaped) - len(trimmed))


def ancestor_unignores(relative: str, is_directory: bool) -> list[str]:
    """``a/b/c`` -> ``!/a/``, ``!/a/b/``, ``!/a/b/c``; a directory target also gets ``/**``."""
    segments = [escape_segment(segment) for segment in relative.split("/") if segment]
    if not segments:
        return []
    patterns: list[str] = []
    for index in range(1, len(segments)):
        patterns.append(f"!/{'/'.join(segments[:index])}/")
    target = "/".join(segments)
    if is_directory:
        patterns.append(f"!/{target}/")
        patterns.append(f"!/{target}/**")
    else:
        patterns.append(f"!/{target}")
    return patterns


def search_globs(rule: str) -> list[str]:
    if rule.startswith("**/"):
        return [rule]
    if rule.endswith("/"):
        return [f"**/{rule}**"]
    if "/" not in rule:
        return [f"**/{rule}", f"**/{rule}/**"]
    return [f"**/{rule}"]


class PathResolver:
    def __init__(
        self,
        root: Path,
        filesystem: IFileSystem | None = None,
        search: IFileSearch | None = None,
        limit: int = SEARCH_MATCH_LIMIT,
        search_exclude: Sequence[str] = DEFAULT_SEARCH_EXCLUDE,
    ) -> None:
        self._root = root
        self._fs = filesystem or LocalFileSystem()
        self._search = search or WorkspaceFileSearch(root, self._fs)
        self._limit = min(limit, SEARCH_MATCH_LIMIT)
        self._search_exclude = list(search_exclude)

    def resolve(self, raw_rule: str) -> PathResolution:
        rule = include_rule(raw_rule)
        resolution = PathResolution(rule=rule)
        if not rule:
            return resolution

        literal = rule.strip("/")
        if literal:
            stat = self._fs.stat(self._root / literal)
            if stat.exists:
                resolution.patterns = ancestor_unignores(literal, stat.is_directory)
                return resolution

        self._search_matches(resolution)
        if not resolution.matches:
            resolution.patterns = [f"!{rule}"]
            return resolution

        seen: set[str] = set()
        for match in resolution.matches:
            for pattern in ancestor_unignores(match, False):
                if pattern not in seen:
                    seen.add(pattern)
                    resolution.patterns.append(pattern)
        return resolution

    def _search_matches(self, resolution: PathResolution) -> None:
        # One budget per rule, shared by all of its globs.
        seen: set[str] = set()
        for glob in search_globs(resolution.rule.lstrip("/")):
            found = self._search.find_files(glob, self._search_exclude, self._limit + 1)
            if len(found) > self._limit:
                resolution.truncated = True
            for match in found:
                if match in seen:
                    continue
                if len(resolution.matches) >= self._limit:
                    resolution.truncated = True
                    break
                seen.add(match)
                resolution.matches.append(match)
            if resolution.truncated:
                logger.warning(
                    "Search for %r stopped at %d matches; remaining files are not included",
                    resolution.rule,
                    self._limit,
                )
                return
