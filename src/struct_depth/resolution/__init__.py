"""Reference resolution: path normalization, import tables, symbol resolver."""

from .imports import ImportTable
from .paths import has_relative_qualifier, normalize, parent_module
from .symbols import SymbolResolver, SymbolUniverse, build_symbol_universe

__all__ = [
    "ImportTable",
    "normalize",
    "has_relative_qualifier",
    "parent_module",
    "SymbolResolver",
    "SymbolUniverse",
    "build_symbol_universe",
]
