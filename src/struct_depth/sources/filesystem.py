"""Local filesystem source provider."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import FileAccessError, SecurityError, SourceListingError, StructDepthError
from ..file_ops import safe_read_file, safe_scan_directory
from ..security import ResourceLimiter, validate_root
from .base import SourceProvider

logger = logging.getLogger(__name__)


class FileSystemSourceProvider(SourceProvider):
    """Reads ``.rs`` files under a directory (or a single ``.rs`` file)."""

    def __init__(self, root: Path, config: AnalysisConfig = DEFAULT_CONFIG) -> None:
        self.root = validate_root(Path(root))
        self.config = config
        self._limiter = ResourceLimiter(
            max_file_size=config.max_file_size_bytes,
            max_files=config.max_files,
        )

    def list_files(self) -> list[PurePath]:
        if self.root.is_file():
            return [self.root]

        self._limiter.reset()
        try:
            files: list[PurePath] = list(
                safe_scan_directory(
                    self.root,
                    suffix=".rs",
                    exclude_dirs=self.config.exclude_dirs,
                    allow_hidden=self.config.allow_hidden_files,
                    limiter=self._limiter,
                    follow_symlinks=self.config.follow_symlinks,
                )
            )
        except (FileAccessError, SecurityError) as e:
            raise SourceListingError(self.root, str(e))

        logger.debug(f"Found {len(files)} Rust files under {self.root}")
        return files

    def read(self, path: PurePath) -> str:
        return safe_read_file(Path(path), limiter=self._limiter)

    def exists(self, path: PurePath) -> bool:
        return Path(path).is_file()

    def display_path(self, path: PurePath) -> str:
        if self.root.is_file():
            base = self.root.parent
            try:
                return Path(path).relative_to(base).as_posix()
            except ValueError:
                return Path(path).as_posix()
        return super().display_path(path)


def open_provider(root: Path, config: AnalysisConfig = DEFAULT_CONFIG) -> FileSystemSourceProvider:
    """Build a filesystem provider, wrapping path errors for the caller."""
    try:
        return FileSystemSourceProvider(root, config)
    except StructDepthError:
        raise
    except OSError as e:
        raise SourceListingError(root, str(e))
