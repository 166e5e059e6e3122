"""Declaration models produced by the extractor.

Every record carries the module path it was declared in. Field types,
alias targets and import origins are kept raw (exactly as written, e.g.
``super::Leaf``); they are canonicalized later by the resolver, once every
file has been extracted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..exceptions import Diagnostic
from .type_refs import join_path

# Module path segments; () is the crate root.
ModulePath = tuple[str, ...]


def qualify(module: ModulePath, name: str) -> str:
    """Fully qualified name of ``name`` declared in ``module``."""
    return join_path((*module, name))


@dataclass(frozen=True)
class AggregateDeclaration:
    """A struct or union definition.

    Attributes:
        name: Fully qualified name (module path + local name)
        field_types: Raw non built-in type references of all fields, in order
        module: Owning module path
        kind: "struct" or "union"
        path: Source file the declaration came from
        line: 1-indexed line of the declaration
    """

    name: str
    field_types: tuple[str, ...]
    module: ModulePath
    kind: str = "struct"
    path: str = ""
    line: int = 0


@dataclass(frozen=True)
class TypeAlias:
    """A ``type Name = Target;`` item.

    Attributes:
        name: Fully qualified alias name
        target: Raw target reference; may carry a generic suffix (``Wrapper<T>``)
        module: Owning module path
    """

    name: str
    target: str
    module: ModulePath
    path: str = ""
    line: int = 0


@dataclass(frozen=True)
class ImportBinding:
    """One name made visible by a ``use`` declaration.

    Attributes:
        local_name: Name as used inside the owning module (after ``as``)
        origin: Raw imported path, e.g. ``super::shapes::Circle``
        module: Owning module path
        public: True for ``pub use`` (a re-export)
    """

    local_name: str
    origin: str
    module: ModulePath
    path: str = ""
    public: bool = False


@dataclass(frozen=True)
class GlobImport:
    """A ``use origin::*;`` declaration."""

    origin: str
    module: ModulePath
    path: str = ""
    public: bool = False


@dataclass(frozen=True)
class TraitDeclaration:
    """A trait definition with its supertrait bounds (raw references)."""

    name: str
    supertraits: tuple[str, ...]
    module: ModulePath
    path: str = ""
    line: int = 0


@dataclass(frozen=True)
class ImplDeclaration:
    """An ``impl Trait for Type`` block (raw references)."""

    trait_name: str
    type_name: str
    module: ModulePath
    path: str = ""
    line: int = 0


@dataclass
class FileDeclarations:
    """Everything extracted from one file or crate tree.

    Attributes:
        opaque_aliases: Qualified names of aliases whose target holds no user
            type (``type Id = u32;``)
        files: Source files that contributed, in extraction order
        modules: Module paths declared (inline or out-of-line)
        diagnostics: Non-fatal events met while extracting
    """

    aggregates: list[AggregateDeclaration] = field(default_factory=list)
    aliases: list[TypeAlias] = field(default_factory=list)
    opaque_aliases: list[str] = field(default_factory=list)
    imports: list[ImportBinding] = field(default_factory=list)
    globs: list[GlobImport] = field(default_factory=list)
    traits: list[TraitDeclaration] = field(default_factory=list)
    impls: list[ImplDeclaration] = field(default_factory=list)
    modules: list[ModulePath] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def merge(self, other: FileDeclarations) -> None:
        """Append another extraction result to this one."""
        self.aggregates.extend(other.aggregates)
        self.aliases.extend(other.aliases)
        self.opaque_aliases.extend(other.opaque_aliases)
        self.imports.extend(other.imports)
        self.globs.extend(other.globs)
        self.traits.extend(other.traits)
        self.impls.extend(other.impls)
        self.modules.extend(other.modules)
        self.files.extend(other.files)
        self.diagnostics.extend(other.diagnostics)
