"""Symbol universe and resolver.

The SymbolUniverse is built once, after every file has been extracted, and
is not modified afterwards. The SymbolResolver turns a raw type reference
written in some module into a canonical, module-qualified name:

1. ``Self`` names the enclosing aggregate.
2. ``crate::``, ``self::`` and ``super::`` paths are normalized.
3. A bare name is looked up, in order, as a declaration of the current
   module (aliases of built-in types included), an import of the current
   module, a glob import of the current module, and finally as the last
   segment of any import in the crate.
   Failing all of these it is joined to the current module path.
4. A qualified path whose first segment is an imported name substitutes the
   import; one whose first segment is a child module of the current module
   is made relative to it; any other qualified path is already absolute.
5. ``pub use`` re-exports are followed to the declaration they name.
6. Type aliases are expanded until a non-alias is reached (see
   ``expand_aliases``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..exceptions import Diagnostic, ErrorCode, Severity
from ..scanning.syntax import (
    AggregateDeclaration,
    FileDeclarations,
    ImplDeclaration,
    ModulePath,
    TraitDeclaration,
    TypeAlias,
    qualify,
)
from ..scanning.type_refs import SELF_TYPE, join_path, split_generic_suffix, split_path
from .imports import ImportTable
from .paths import has_relative_qualifier, is_absolute, normalize, parent_module

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymbolUniverse:
    """Every declaration of a run, keyed by fully qualified name.

    Attributes:
        aggregates: Struct and union declarations (duplicates merged)
        aliases: Type aliases (first declaration wins)
        opaque_aliases: Aliases of built-in types, which resolve to nothing
        traits: Trait declarations (first declaration wins)
        impls: Trait implementations, in extraction order
        imports: Import table over all modules
        modules: Every module path seen, the crate root included
    """

    aggregates: dict[str, AggregateDeclaration] = field(default_factory=dict)
    aliases: dict[str, TypeAlias] = field(default_factory=dict)
    opaque_aliases: frozenset[str] = frozenset()
    traits: dict[str, TraitDeclaration] = field(default_factory=dict)
    impls: tuple[ImplDeclaration, ...] = ()
    imports: ImportTable = field(default_factory=ImportTable)
    modules: frozenset[ModulePath] = frozenset({()})

    def is_declared(self, name: str) -> bool:
        return (
            name in self.aggregates
            or name in self.aliases
            or name in self.traits
            or name in self.opaque_aliases
        )


def build_symbol_universe(
    declarations: FileDeclarations,
) -> tuple[SymbolUniverse, list[Diagnostic]]:
    """Index merged extraction output into an immutable universe.

    The same declaration met twice (one file reached from two crate roots)
    is kept once. Distinct aggregates sharing a qualified name have their
    field lists concatenated, which is reported as SD302.
    """
    diagnostics: list[Diagnostic] = []

    aggregates: dict[str, AggregateDeclaration] = {}
    seen: set[tuple[str, str, int]] = set()
    for aggregate in declarations.aggregates:
        key = (aggregate.name, aggregate.path, aggregate.line)
        if key in seen:
            continue
        seen.add(key)
        existing = aggregates.get(aggregate.name)
        if existing is None:
            aggregates[aggregate.name] = aggregate
            continue
        logger.debug(f"Merging duplicate declaration of {aggregate.name}")
        diagnostics.append(
            Diagnostic(
                ErrorCode.SD302,
                f"{aggregate.name} declared in {existing.path}:{existing.line} "
                f"and {aggregate.path}:{aggregate.line}; fields merged",
                aggregate.path,
            )
        )
        aggregates[aggregate.name] = replace(
            existing, field_types=existing.field_types + aggregate.field_types
        )

    aliases: dict[str, TypeAlias] = {}
    for alias in declarations.aliases:
        aliases.setdefault(alias.name, alias)

    traits: dict[str, TraitDeclaration] = {}
    for trait in declarations.traits:
        traits.setdefault(trait.name, trait)

    impls: list[ImplDeclaration] = []
    seen_impls: set[ImplDeclaration] = set()
    for impl in declarations.impls:
        if impl not in seen_impls:
            seen_impls.add(impl)
            impls.append(impl)

    modules = frozenset({(), *declarations.modules})
    imports = ImportTable.build(declarations.imports, declarations.globs, modules)

    universe = SymbolUniverse(
        aggregates=aggregates,
        aliases=aliases,
        opaque_aliases=frozenset(declarations.opaque_aliases),
        traits=traits,
        impls=tuple(impls),
        imports=imports,
        modules=modules,
    )
    return universe, diagnostics


class SymbolResolver:
    """Resolves raw type references against a SymbolUniverse.

    Results are cached per (reference, module, owner). Alias and re-export
    cycles are truncated and recorded in ``diagnostics``.
    """

    def __init__(self, universe: SymbolUniverse) -> None:
        self.universe = universe
        self._cache: dict[tuple[str, ModulePath, Optional[str]], str] = {}
        self._diagnostics: dict[tuple[ErrorCode, str], Diagnostic] = {}

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics.values())

    def resolve(self, raw: str, module: ModulePath, owner: Optional[str] = None) -> str:
        """Canonical name for ``raw`` written in ``module``, aliases expanded.

        Args:
            raw: Reference as written, e.g. ``super::Leaf`` or ``Wrapper<T>``
            module: Module the reference appears in
            owner: Qualified name of the enclosing aggregate, for ``Self``
        """
        key = (raw, module, owner)
        cached = self._cache.get(key)
        if cached is None:
            cached = self.expand_aliases(self.canonicalize(raw, module, owner))
            self._cache[key] = cached
        return cached

    def canonicalize(self, raw: str, module: ModulePath, owner: Optional[str] = None) -> str:
        """Canonical name for ``raw`` without alias expansion.

        A generic suffix (``<T>``) is carried over verbatim.
        """
        base, suffix = split_generic_suffix(raw)
        if base == SELF_TYPE:
            return (owner or SELF_TYPE) + suffix

        segments = split_path(base)
        if not segments:
            return raw
        if has_relative_qualifier(base) or is_absolute(base):
            name = normalize(base, module)
        elif len(segments) == 1:
            name = self._resolve_bare(segments[0], module)
        else:
            name = self._resolve_qualified(segments, module)
        return self._follow_reexports(name) + suffix

    def _resolve_bare(self, name: str, module: ModulePath) -> str:
        imports = self.universe.imports
        local = qualify(module, name)
        if self.universe.is_declared(local):
            return local

        origin = imports.lookup(module, name)
        if origin is not None:
            return origin

        for glob in imports.globs(module):
            candidate = self._follow_reexports(join_path((*split_path(glob), name)))
            if self.universe.is_declared(candidate):
                return candidate

        origin = imports.by_tail(name)
        if origin is not None:
            return origin
        return local

    def _resolve_qualified(self, segments: list[str], module: ModulePath) -> str:
        head, rest = segments[0], segments[1:]
        origin = self.universe.imports.lookup(module, head)
        if origin is not None:
            return join_path((*split_path(origin), *rest))
        if module and (*module, head) in self.universe.modules:
            return join_path((*module, *segments))
        return join_path(segments)

    def _follow_reexports(self, name: str) -> str:
        """Follow ``pub use`` chains from an undeclared name to its origin."""
        imports = self.universe.imports
        chain = [name]
        while not self.universe.is_declared(name):
            module, last = parent_module(name)
            origin = imports.lookup_public(module, last)
            if origin is None:
                origin = self._glob_reexport(module, last)
            if origin is None or origin == name:
                break
            if origin in chain:
                self._record(
                    ErrorCode.SD301,
                    f"Re-export cycle {' -> '.join(chain + [origin])}; stopped at {name}",
                    name,
                )
                break
            chain.append(origin)
            name = origin
        return name

    def _glob_reexport(self, module: ModulePath, last: str) -> Optional[str]:
        for glob in self.universe.imports.public_globs(module):
            candidate = join_path((*split_path(glob), last))
            if self.universe.is_declared(candidate):
                return candidate
        return None

    def expand_aliases(self, name: str) -> str:
        """Follow type aliases from ``name`` to the type they stand for.

        Each target is canonicalized in the module of the alias that names
        it. Expansion stops at a name that is not an alias, or when the
        chain returns to a name already visited (the current name is kept).

        A name carrying generic arguments (``Inner<Leaf>``) is expanded one
        step only: its base is replaced by the alias target and the suffix
        is kept verbatim. A target that is itself generic leaves the name
        unchanged.
        """
        visited: list[str] = []
        current = name
        while True:
            base, suffix = split_generic_suffix(current)
            if suffix:
                return self._substitute_generic_base(base, suffix)
            alias = self.universe.aliases.get(current)
            if alias is None:
                return current
            if current in visited:
                self._record(
                    ErrorCode.SD300,
                    f"Type alias cycle {' -> '.join(visited + [current])}; stopped at {current}",
                    alias.path,
                )
                return current
            visited.append(current)
            current = self.canonicalize(alias.target, alias.module)

    def _substitute_generic_base(self, base: str, suffix: str) -> str:
        alias = self.universe.aliases.get(base)
        if alias is None:
            return base + suffix
        target = self.canonicalize(alias.target, alias.module)
        if split_generic_suffix(target)[1]:
            return base + suffix
        return target + suffix

    def _record(self, code: ErrorCode, message: str, path: Optional[str]) -> None:
        key = (code, message)
        if key not in self._diagnostics:
            logger.debug(message)
            self._diagnostics[key] = Diagnostic(code, message, path, Severity.DEBUG)
