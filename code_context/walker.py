"""Two-pass project traversal: folder structure, then file contents."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, TextIO

from code_context.constants import (
    BINARY_EXTENSIONS,
    BINARY_PLACEHOLDER,
    BINARY_SNIFF_BYTES,
    INDENT,
    READ_ERROR_PLACEHOLDER,
)
from code_context.filesystem import DirEntry, IFileSystem, LocalFileSystem
from code_context.log import get_logger
from code_context.models import WalkStats
from code_context.resolution.matcher import PatternMatcher

logger = get_logger(__name__)


def is_binary_file(path: Path, filesystem: IFileSystem | None = None) -> bool:
    if path.suffix.lower() in BINARY_EXTENSIONS:
        return True
    fs = filesystem or LocalFileSystem()
    try:
        head = fs.read_file_bytes(path, BINARY_SNIFF_BYTES)
    except OSError:
        return False
    return b"\x00" in head


class TreeWalker:
    def __init__(
        self,
        root: Path,
        matcher: PatternMatcher,
        filesystem: IFileSystem | None = None,
    ) -> None:
        self._root = root
        self._matcher = matcher
        self._fs = filesystem or LocalFileSystem()

    def write(self, sink: TextIO) -> WalkStats:
        stats = WalkStats()
        self.write_structure(sink, stats)
        sink.write("\n")
        self.write_contents(sink, stats)
        return stats

    def write_structure(self, sink: TextIO, stats: WalkStats | None = None) -> None:
        stats = stats if stats is not None else WalkStats()
        for depth, relative, entry in self._included(self._root, "", 0):
            suffix = "/" if entry.is_directory else ""
            sink.write(f"{INDENT * depth}{entry.name}{suffix}\n")
            if entry.is_directory:
                stats.directories += 1

    def write_contents(self, sink: TextIO, stats: WalkStats | None = None) -> None:
        stats = stats if stats is not None else WalkStats()
        for _, relative, entry in self._included(self._root, "", 0):
            if not entry.is_file:
                continue
            stats.files += 1
            sink.write(f"\n--- {relative} ---\n")
            if is_binary_file(entry.path, self._fs):
                stats.binary_files += 1
                sink.write(f"{BINARY_PLACEHOLDER}\n")
                continue
            try:
                content = self._fs.read_file_text(entry.path)
            except OSError as exc:
                stats.read_errors += 1
                logger.warning("Could not read %s: %s", relative, exc)
                sink.write(READ_ERROR_PLACEHOLDER.format(message=exc.strerror or exc) + "\n")
                continue
            sink.write(f"{content}\n")

    def included_files(self) -> list[str]:
        return [
            relative
            for _, relative, entry in self._included(self._root, "", 0)
            if entry.is_file
        ]

    def _entries(self, directory: Path) -> list[DirEntry]:
        try:
            entries = self._fs.read_directory(directory)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return []
        return sorted(entries, key=lambda item: item.name)

    def _included(
        self, directory: Path, prefix: str, depth: int
    ) -> Iterator[tuple[int, str, DirEntry]]:
        for entry in self._entries(directory):
            relative = f"{prefix}{entry.name}"
            if entry.is_directory:
                if self._matcher.matches(f"{relative}/", True):
                    continue
                yield depth, relative, entry
                yield from self._included(entry.path, f"{relative}/", depth + 1)
            elif entry.is_file:
                if self._matcher.matches(relative):
                    continue
                yield depth, relative, entry
