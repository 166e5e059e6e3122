"""Rust source scanning: parser wrapper, declaration models and extractor."""

from .extractor import DeclarationExtractor
from .syntax import (
    AggregateDeclaration,
    FileDeclarations,
    GlobImport,
    ImplDeclaration,
    ImportBinding,
    ModulePath,
    TraitDeclaration,
    TypeAlias,
    qualify,
)
from .treesitter_parser import TreeSitterParser, get_parser
from .type_refs import (
    BUILTIN_TYPES,
    ArrayType,
    GenericType,
    OtherType,
    PathType,
    ReferenceType,
    TupleType,
    TypeRef,
    dependencies,
    is_builtin,
    primary_reference,
)

__all__ = [
    "DeclarationExtractor",
    "AggregateDeclaration",
    "FileDeclarations",
    "GlobImport",
    "ImplDeclaration",
    "ImportBinding",
    "ModulePath",
    "TraitDeclaration",
    "TypeAlias",
    "qualify",
    "TreeSitterParser",
    "get_parser",
    "BUILTIN_TYPES",
    "ArrayType",
    "GenericType",
    "OtherType",
    "PathType",
    "ReferenceType",
    "TupleType",
    "TypeRef",
    "dependencies",
    "is_builtin",
    "primary_reference",
]
