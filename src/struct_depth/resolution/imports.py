"""Per-module import table built from ``use`` declarations.

Origins are normalized in the module that declares the import, so a lookup
always yields an absolute path. Within one module the last binding
registered for a local name wins.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..scanning.syntax import GlobImport, ImportBinding, ModulePath
from ..scanning.type_refs import join_path, split_path
from .paths import has_relative_qualifier, is_absolute, normalize

logger = logging.getLogger(__name__)


class ImportTable:
    """Locally visible names per module, plus a global tail index.

    Attributes:
        binding_count: Number of bindings registered
    """

    def __init__(self, modules: Iterable[ModulePath] = ()) -> None:
        self._modules: frozenset[ModulePath] = frozenset(modules)
        self._bindings: dict[ModulePath, dict[str, str]] = {}
        self._public: dict[ModulePath, dict[str, str]] = {}
        self._globs: dict[ModulePath, list[str]] = {}
        self._public_globs: dict[ModulePath, list[str]] = {}
        # Last origin segment -> first origin registered with it
        self._by_tail: dict[str, str] = {}
        self.binding_count = 0

    @classmethod
    def build(
        cls,
        bindings: Iterable[ImportBinding],
        globs: Iterable[GlobImport] = (),
        modules: Iterable[ModulePath] = (),
    ) -> ImportTable:
        table = cls(modules)
        for binding in bindings:
            table.register(binding)
        for glob in globs:
            table.register_glob(glob)
        return table

    def absolute_origin(self, origin: str, module: ModulePath) -> str:
        """Absolute form of an import origin written in ``module``.

        ``use inner::Leaf;`` inside module ``m`` names ``m::inner::Leaf`` when
        ``m::inner`` is a known module; otherwise the path is taken as-is
        (an external crate or a path from the crate root).
        """
        if has_relative_qualifier(origin) or is_absolute(origin):
            return normalize(origin, module)
        segments = split_path(origin)
        if module and len(segments) > 1 and (*module, segments[0]) in self._modules:
            return join_path((*module, *segments))
        return join_path(segments)

    def register(self, binding: ImportBinding) -> None:
        origin = self.absolute_origin(binding.origin, binding.module)
        scope = self._bindings.setdefault(binding.module, {})
        if binding.local_name in scope and scope[binding.local_name] != origin:
            logger.debug(
                f"Import {binding.local_name} in {join_path(binding.module) or 'crate'} "
                f"rebound from {scope[binding.local_name]} to {origin}"
            )
        scope[binding.local_name] = origin
        if binding.public:
            self._public.setdefault(binding.module, {})[binding.local_name] = origin

        segments = split_path(origin)
        tail = segments[-1] if segments else origin
        self._by_tail.setdefault(tail, origin)
        self.binding_count += 1

    def register_glob(self, glob: GlobImport) -> None:
        origin = self.absolute_origin(glob.origin, glob.module)
        self._globs.setdefault(glob.module, []).append(origin)
        if glob.public:
            self._public_globs.setdefault(glob.module, []).append(origin)

    def lookup(self, module: ModulePath, local_name: str) -> Optional[str]:
        """Origin bound to ``local_name`` by an import in ``module``."""
        return self._bindings.get(module, {}).get(local_name)

    def lookup_public(self, module: ModulePath, local_name: str) -> Optional[str]:
        """Origin re-exported as ``module::local_name`` by a ``pub use``."""
        return self._public.get(module, {}).get(local_name)

    def globs(self, module: ModulePath) -> list[str]:
        return list(self._globs.get(module, ()))

    def public_globs(self, module: ModulePath) -> list[str]:
        return list(self._public_globs.get(module, ()))

    def by_tail(self, name: str) -> Optional[str]:
        """First imported origin anywhere whose last segment is ``name``."""
        return self._by_tail.get(name)
