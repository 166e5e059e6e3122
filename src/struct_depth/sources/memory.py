"""In-memory source provider for embedding and tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePath, PurePosixPath

from ..exceptions import FileAccessError
from .base import SourceProvider


class InMemorySourceProvider(SourceProvider):
    """Serves sources from a ``{path: text}`` mapping.

    Paths are POSIX-style and relative to an implicit root, e.g.
    ``{"src/lib.rs": "mod a;", "src/a.rs": "pub struct A;"}``.
    """

    def __init__(self, files: Mapping[str, str], root: str = ".") -> None:
        self.root = PurePosixPath(root)
        self._files = {self.root / PurePosixPath(p): text for p, text in files.items()}

    def list_files(self) -> list[PurePath]:
        return sorted(p for p in self._files if p.suffix == ".rs")

    def read(self, path: PurePath) -> str:
        key = PurePosixPath(path)
        if key not in self._files:
            raise FileAccessError(key, "No such file")
        return self._files[key]

    def exists(self, path: PurePath) -> bool:
        return PurePosixPath(path) in self._files

    def display_path(self, path: PurePath) -> str:
        if self.root == PurePosixPath("."):
            return PurePosixPath(path).as_posix()
        return super().display_path(path)
