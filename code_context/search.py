"""Glob search over the project tree, used to expand include-mode rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from code_context.constants import SEARCH_MATCH_LIMIT
from code_context.filesystem import IFileSystem, LocalFileSystem
from code_context.log import get_logger
from code_context.resolution.matcher import PatternMatcher

logger = get_logger(__name__)


class IFileSearch(ABC):
    @abstractmethod
    def find_files(
        self, glob: str, exclude: Sequence[str] = (), limit: int = SEARCH_MATCH_LIMIT
    ) -> list[str]:
        """Return up to ``limit`` project-relative file paths matching ``glob``."""


class WorkspaceFileSearch(IFileSearch):
    def __init__(self, root: Path, filesystem: IFileSystem | None = None) -> None:
        self._root = root
        self._fs = filesystem or LocalFileSystem()

    def find_files(
        self, glob: str, exclude: Sequence[str] = (), limit: int = SEARCH_MATCH_LIMIT
    ) -> list[str]:
        if limit <= 0:
            return []
        target = PatternMatcher([glob])
        skipped = PatternMatcher(exclude)
        matches: list[str] = []
        self._walk(self._root, "", target, skipped, matches, limit)
        return matches

    def _walk(
        self,
        directory: Path,
        prefix: str,
        target: PatternMatcher,
        skipped: PatternMatcher,
        matches: list[str],
        limit: int,
    ) -> None:
        try:
            entries = self._fs.read_directory(directory)
        except OSError as exc:
            logger.debug("Search skipped unreadable directory %s: %s", directory, exc)
            return

        for entry in sorted(entries, key=lambda item: item.name):
            if len(matches) >= limit:
                return
            relative = f"{prefix}{entry.name}"
            if entry.is_directory:
                if skipped.matches(f"{relative}/", True):
                    continue
                self._walk(entry.path, f"{relative}/", target, skipped, matches, limit)
            elif entry.is_file:
                if skipped.matches(relative) or not target.matches(relative):
                    continue
                matches.append(relative)
