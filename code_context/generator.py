"""Produce the project context artifact for one generation request."""

from __future__ import annotations

from pathlib import Path

from code_context.constants import FOLDER_STRUCTURE_HEADER
from code_context.errors import OutputWriteError, ProjectRootError
from code_context.filesystem import IFileSystem, LocalFileSystem
from code_context.log import get_logger
from code_context.models import (
    GenerationRequest,
    GenerationResult,
    GenerationStatus,
    ResolutionStatus,
    WalkStats,
)
from code_context.resolution.matcher import PatternMatcher
from code_context.resolution.modes import ModeResolver
from code_context.resolution.paths import PathResolver
from code_context.search import IFileSearch
from code_context.settings import Settings
from code_context.utils import relative_posix
from code_context.walker import TreeWalker

logger = get_logger(__name__)

_UNREADY_STATUS = {
    ResolutionStatus.NEEDS_CONFIRMATION: GenerationStatus.NEEDS_CONFIRMATION,
    ResolutionStatus.EMPTY_WHITELIST: GenerationStatus.EMPTY_WHITELIST,
}


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial context file %s: %s", path, exc)


def artifact_header(output_path: Path) -> str:
    return f"--- START OF FILE {output_path.name} ---\n\n{FOLDER_STRUCTURE_HEADER}\n"


class ContextGenerator:
    def __init__(
        self,
        project_root: Path,
        settings: Settings | None = None,
        filesystem: IFileSystem | None = None,
        search: IFileSearch | None = None,
    ) -> None:
        self.project_root = project_root
        self.settings = settings or Settings()
        self._fs = filesystem or LocalFileSystem()
        self._search = search

    @property
    def output_path(self) -> Path:
        return self.settings.output_path(self.project_root)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        if not self._fs.stat(self.project_root).is_directory:
            raise ProjectRootError(self.project_root)

        resolver = ModeResolver(
            PathResolver(
                self.project_root,
                filesystem=self._fs,
                search=self._search,
                limit=self.settings.search_limit,
                search_exclude=self.settings.search_exclude,
            ),
            relative_output=relative_posix(self.output_path, self.project_root),
        )
        resolved = resolver.resolve(request)
        if not resolved.ready:
            return GenerationResult(
                status=_UNREADY_STATUS[resolved.status],
                mode=request.mode,
                patterns=resolved.patterns,
            )

        walker = TreeWalker(
            self.project_root, PatternMatcher(resolved.patterns), filesystem=self._fs
        )
        stats = self._write(walker)
        logger.info(
            "Wrote %s (%d files, %d binary, %d unreadable)",
            self.output_path,
            stats.files,
            stats.binary_files,
            stats.read_errors,
        )
        return GenerationResult(
            status=GenerationStatus.WRITTEN,
            mode=request.mode,
            patterns=resolved.patterns,
            output_path=self.output_path,
            stats=stats,
            truncated_rules=resolved.truncated_rules,
        )

    def _write(self, walker: TreeWalker) -> WalkStats:
        path = self.output_path
        try:
            with self._fs.open_sink(path) as sink:
                sink.write(artifact_header(path))
                return walker.write(sink)
        except OSError as exc:
            _discard(path)
            raise OutputWriteError(path, str(exc)) from exc
