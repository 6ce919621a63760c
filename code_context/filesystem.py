"""Filesystem capability used by path resolution and the tree walker."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO


@dataclass(frozen=True)
class PathStat:
    exists: bool
    is_directory: bool = False


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: Path
    is_directory: bool
    is_file: bool


class IFileSystem(ABC):
    @abstractmethod
    def stat(self, path: Path) -> PathStat:
        """Return existence and kind of ``path``; never raises."""

    @abstractmethod
    def read_directory(self, path: Path) -> list[DirEntry]:
        """List entries of ``path``; raises OSError when unreadable."""

    @abstractmethod
    def read_file_bytes(self, path: Path, max_bytes: int) -> bytes:
        """Read at most ``max_bytes`` from the start of ``path``."""

    @abstractmethod
    def read_file_text(self, path: Path) -> str:
        """Read ``path`` as UTF-8 text."""

    @abstractmethod
    def open_sink(self, path: Path) -> TextIO:
        """Open ``path`` for sequential UTF-8 writing."""


class LocalFileSystem(IFileSystem):
    def stat(self, path: Path) -> PathStat:
        try:
            return PathStat(exists=path.exists(), is_directory=path.is_dir())
        except OSError:
            return PathStat(exists=False)

    def read_directory(self, path: Path) -> list[DirEntry]:
        entries: list[DirEntry] = []
        with os.scandir(path) as iterator:
            for entry in iterator:
                try:
                    is_directory = entry.is_dir(follow_symlinks=False)
                    is_file = not is_directory and entry.is_file()
                except OSError:
                    continue
                entries.append(
                    DirEntry(
                        name=entry.name,
                        path=Path(entry.path),
                        is_directory=is_directory,
                        is_file=is_file,
                    )
                )
        return entries

    def read_file_bytes(self, path: Path, max_bytes: int) -> bytes:
        with path.open("rb") as handle:
            return handle.read(max_bytes)

    def read_file_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")

    def open_sink(self, path: Path) -> TextIO:
        path.parent.mkdir(parents=True, exist_ok=True)
        return path.open("w", encoding="utf-8", newline="\n")
