"""Source provider interface consumed by the analysis engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Optional

# File names whose submodules live in the file's own directory.
MOD_RS_NAMES = ("lib.rs", "main.rs", "mod.rs")
CRATE_ROOT_NAMES = ("lib.rs", "main.rs")


class SourceProvider(ABC):
    """Yields Rust source paths and their text.

    Attributes:
        root: The analysis root all listed paths live under
    """

    root: PurePath

    @abstractmethod
    def list_files(self) -> list[PurePath]:
        """All ``.rs`` files under the root.

        Raises:
            SourceListingError: If the root cannot be listed
        """

    @abstractmethod
    def read(self, path: PurePath) -> str:
        """Return a file's text.

        Raises:
            FileAccessError: If the file is missing or unreadable
            SecurityError: If the file exceeds the size limit
        """

    @abstractmethod
    def exists(self, path: PurePath) -> bool:
        """True if ``path`` is a readable source file of this provider."""

    def locate_submodule_file(self, base_module_dir: PurePath, name: str) -> Optional[PurePath]:
        """Find the file for ``mod name;`` declared in ``base_module_dir``.

        Tries ``name.rs`` first, then ``name/mod.rs``.
        """
        for candidate in (base_module_dir / f"{name}.rs", base_module_dir / name / "mod.rs"):
            if self.exists(candidate):
                return candidate
        return None

    def display_path(self, path: PurePath) -> str:
        """Path relative to the root, for reports."""
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return path.as_posix()
        text = relative.as_posix()
        return path.name if text == "." else text


def is_crate_root(path: PurePath) -> bool:
    return path.name in CRATE_ROOT_NAMES


def module_dir_of(path: PurePath, is_root: bool) -> PurePath:
    """Directory holding the submodules of the module defined by ``path``.

    Crate roots and ``mod.rs`` files own their directory; any other file
    ``dir/name.rs`` owns ``dir/name/``.
    """
    if is_root or path.name in MOD_RS_NAMES:
        return path.parent
    return path.parent / path.stem
