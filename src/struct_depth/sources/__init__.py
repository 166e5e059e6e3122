"""Source providers: where Rust files and their text come from."""

from .base import SourceProvider, is_crate_root, module_dir_of
from .filesystem import FileSystemSourceProvider, open_provider
from .git import clone_repository, is_remote
from .memory import InMemorySourceProvider

__all__ = [
    "SourceProvider",
    "FileSystemSourceProvider",
    "InMemorySourceProvider",
    "open_provider",
    "is_crate_root",
    "module_dir_of",
    "clone_repository",
    "is_remote",
]
