"""DeclarationExtractor: syntax trees to module-tagged declarations.

Walks a Rust file's item list and records struct and union declarations,
type aliases, ``use`` bindings, traits and trait implementations, each
tagged with its module path. Inline ``mod a { ... }`` blocks extend the
module path; out-of-line ``mod a;`` declarations are located through the
source provider (``a.rs`` first, then ``a/mod.rs``) and extracted in turn.

Usage:
    extractor = DeclarationExtractor(provider, config)
    declarations = extractor.extract_crate(PurePosixPath("src/lib.rs"))
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import TYPE_CHECKING, Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import (
    Diagnostic,
    ErrorCode,
    FileAccessError,
    ParsingError,
    SecurityError,
    Severity,
)
from ..sources.base import SourceProvider, module_dir_of
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
from .treesitter_parser import first_error_line, get_parser, node_text
from .type_refs import (
    SELF_TYPE,
    ArrayType,
    GenericType,
    OtherType,
    PathType,
    ReferenceType,
    TupleType,
    TypeRef,
    dependencies,
    join_path,
    primary_reference,
    split_path,
)

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

# Nodes that never carry a type inside type argument or tuple lists
_SKIPPED_NODES = frozenset({"lifetime", "comment", "line_comment", "block_comment"})

# Leaves of a use tree that name a single path
_USE_PATH_NODES = frozenset(
    {"identifier", "type_identifier", "scoped_identifier", "crate", "super", "self", "metavariable"}
)

_MODULE_KEYWORDS = frozenset({"crate", "super", "self"})


def _compact(text: str) -> str:
    """Drop whitespace inside a path (``a :: B`` -> ``a::B``)."""
    return "".join(text.split())


def _line(node: Node) -> int:
    return node.start_point[0] + 1


class DeclarationExtractor:
    """Extracts declarations from Rust sources served by a provider."""

    def __init__(self, provider: SourceProvider, config: AnalysisConfig = DEFAULT_CONFIG) -> None:
        self.provider = provider
        self.config = config
        self._extra_builtins = frozenset(config.extra_builtin_types)

    def extract_crate(
        self, root_file: PurePath, visited: Optional[set[PurePath]] = None
    ) -> FileDeclarations:
        """Extract a file at the crate root and every submodule it declares.

        Args:
            root_file: The crate root (``lib.rs``, ``main.rs``) or a stray file
            visited: Files already extracted; updated in place. Files met
                again are not re-extracted.

        Returns:
            Declarations of the whole module tree below ``root_file``
        """
        if visited is None:
            visited = set()
        result = FileDeclarations()
        self._extract_file(root_file, (), module_dir_of(root_file, is_root=True), result, visited)
        return result

    def extract_source(
        self, text: str, module: ModulePath = (), path: str = "<memory>"
    ) -> FileDeclarations:
        """Extract declarations from source text without touching the provider.

        Out-of-line ``mod a;`` declarations cannot be located and are
        reported as missing.
        """
        result = FileDeclarations()
        self._extract_text(text, module, None, path, result, set())
        return result

    # ── Files ─────────────────────────────────────────────────────────

    def _extract_file(
        self,
        path: PurePath,
        module: ModulePath,
        module_dir: PurePath,
        result: FileDeclarations,
        visited: set[PurePath],
    ) -> None:
        visited.add(path)
        display = self.provider.display_path(path)

        try:
            text = self.provider.read(path)
        except SecurityError as e:
            logger.warning(f"Skipping {display}: {e.reason}")
            result.diagnostics.append(
                Diagnostic(ErrorCode.SD101, f"{display}: {e.reason}", display, Severity.WARNING)
            )
            return
        except FileAccessError as e:
            logger.warning(f"Cannot read {display}: {e.reason}")
            result.diagnostics.append(
                Diagnostic(ErrorCode.SD100, f"{display}: {e.reason}", display, Severity.WARNING)
            )
            return

        self._extract_text(text, module, module_dir, display, result, visited)

    def _extract_text(
        self,
        text: str,
        module: ModulePath,
        module_dir: Optional[PurePath],
        display: str,
        result: FileDeclarations,
        visited: set[PurePath],
    ) -> None:
        try:
            tree = get_parser().parse_source(text, display)
        except ParsingError as e:
            self._parse_failure(display, e.reason, result)
            return

        root = tree.root_node
        if root.has_error and self.config.skip_files_with_syntax_errors:
            line = first_error_line(root)
            where = f"near line {line}" if line is not None else "in file"
            self._parse_failure(display, f"syntax error {where}", result)
            return

        result.files.append(display)
        self._walk_items(root, module, module_dir, display, result, visited)

    def _parse_failure(self, display: str, reason: str, result: FileDeclarations) -> None:
        logger.warning(f"Skipping {display}: {reason}")
        result.diagnostics.append(
            Diagnostic(ErrorCode.SD102, f"{display}: {reason}", display, Severity.WARNING)
        )

    # ── Items ─────────────────────────────────────────────────────────

    def _walk_items(
        self,
        container: Node,
        module: ModulePath,
        module_dir: Optional[PurePath],
        path: str,
        result: FileDeclarations,
        visited: set[PurePath],
    ) -> None:
        for node in container.named_children:
            kind = node.type
            if kind == "struct_item":
                self._add_aggregate(node, "struct", module, path, result)
            elif kind == "union_item":
                if self.config.include_unions:
                    self._add_aggregate(node, "union", module, path, result)
            elif kind == "type_item":
                self._add_alias(node, module, path, result)
            elif kind == "use_declaration":
                self._add_use(node, module, path, result)
            elif kind == "mod_item":
                self._enter_module(node, module, module_dir, path, result, visited)
            elif kind == "trait_item":
                self._add_trait(node, module, path, result)
            elif kind == "impl_item":
                self._add_impl(node, module, path, result)

    def _add_aggregate(
        self, node: Node, kind: str, module: ModulePath, path: str, result: FileDeclarations
    ) -> None:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return
        params = self._type_parameters(node)
        refs: list[str] = []

        body = node.child_by_field_name("body")
        if body is not None and body.type == "field_declaration_list":
            for field_node in body.named_children:
                if field_node.type != "field_declaration":
                    continue
                type_node = field_node.child_by_field_name("type")
                if type_node is not None:
                    refs.extend(self._field_refs(type_node, params))
        elif body is not None and body.type == "ordered_field_declaration_list":
            for type_node in body.children_by_field_name("type"):
                refs.extend(self._field_refs(type_node, params))

        result.aggregates.append(
            AggregateDeclaration(
                name=qualify(module, name),
                field_types=tuple(refs),
                module=module,
                kind=kind,
                path=path,
                line=_line(node),
            )
        )

    def _add_alias(
        self, node: Node, module: ModulePath, path: str, result: FileDeclarations
    ) -> None:
        name = node_text(node.child_by_field_name("name"))
        type_node = node.child_by_field_name("type")
        if not name or type_node is None:
            return
        params = self._type_parameters(node)
        target = primary_reference(self.type_ref(type_node), params, self._extra_builtins)
        if target is None:
            # Aliases of built-ins or parameters stand for nothing composable
            logger.debug(f"Alias {qualify(module, name)} has no user-type target")
            result.opaque_aliases.append(qualify(module, name))
            return
        result.aliases.append(
            TypeAlias(
                name=qualify(module, name),
                target=target,
                module=module,
                path=path,
                line=_line(node),
            )
        )

    def _add_trait(
        self, node: Node, module: ModulePath, path: str, result: FileDeclarations
    ) -> None:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return
        supertraits: list[str] = []
        bounds = node.child_by_field_name("bounds")
        if bounds is not None:
            for bound in bounds.named_children:
                bound_name = self._trait_name(bound)
                if bound_name:
                    supertraits.append(bound_name)
        result.traits.append(
            TraitDeclaration(
                name=qualify(module, name),
                supertraits=tuple(supertraits),
                module=module,
                path=path,
                line=_line(node),
            )
        )

    def _add_impl(
        self, node: Node, module: ModulePath, path: str, result: FileDeclarations
    ) -> None:
        trait_node = node.child_by_field_name("trait")
        type_node = node.child_by_field_name("type")
        if trait_node is None or type_node is None:
            return  # inherent impl
        trait_name = self._trait_name(trait_node)
        params = self._type_parameters(node)
        type_deps = dependencies(self.type_ref(type_node), params, self._extra_builtins)
        if not trait_name or not type_deps:
            return
        result.impls.append(
            ImplDeclaration(
                trait_name=trait_name,
                type_name=type_deps[0],
                module=module,
                path=path,
                line=_line(node),
            )
        )

    def _trait_name(self, node: Node) -> str:
        """Path of a trait bound; '' for lifetimes, ``?Sized`` and the like."""
        if node.type in ("type_identifier", "scoped_type_identifier"):
            return _compact(node_text(node))
        if node.type == "generic_type":
            return _compact(node_text(node.child_by_field_name("type")))
        return ""

    # ── Modules ───────────────────────────────────────────────────────

    def _enter_module(
        self,
        node: Node,
        module: ModulePath,
        module_dir: Optional[PurePath],
        path: str,
        result: FileDeclarations,
        visited: set[PurePath],
    ) -> None:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return
        child_module = (*module, name)
        result.modules.append(child_module)

        body = node.child_by_field_name("body")
        if body is not None:
            child_dir = module_dir / name if module_dir is not None else None
            self._walk_items(body, child_module, child_dir, path, result, visited)
            return

        if not self.config.follow_submodules:
            return

        module_name = join_path(child_module)
        located = None
        if module_dir is not None:
            located = self.provider.locate_submodule_file(module_dir, name)
        if located is None:
            logger.debug(f"No file for module {module_name} declared in {path}")
            result.diagnostics.append(
                Diagnostic(
                    ErrorCode.SD200,
                    f"Module {module_name} declared in {path} has no source file",
                    path,
                )
            )
            return
        if located in visited:
            display = self.provider.display_path(located)
            logger.debug(f"Module file {display} already extracted")
            result.diagnostics.append(
                Diagnostic(
                    ErrorCode.SD201,
                    f"Module file {display} already extracted, not re-read for {module_name}",
                    display,
                    Severity.DEBUG,
                )
            )
            return

        self._extract_file(
            located, child_module, module_dir_of(located, is_root=False), result, visited
        )

    # ── Imports ───────────────────────────────────────────────────────

    def _add_use(
        self, node: Node, module: ModulePath, path: str, result: FileDeclarations
    ) -> None:
        argument = node.child_by_field_name("argument")
        if argument is None:
            return
        public = any(child.type == "visibility_modifier" for child in node.children)
        self._flatten_use(argument, [], module, path, public, result)

    def _flatten_use(
        self,
        node: Node,
        prefix: list[str],
        module: ModulePath,
        path: str,
        public: bool,
        result: FileDeclarations,
    ) -> None:
        """Turn one use tree into bindings, one per leaf."""
        kind = node.type

        if kind in _USE_PATH_NODES:
            segments = prefix + split_path(_compact(node_text(node)))
            if len(segments) > 1 and segments[-1] == "self":
                # `use a::b::{self}` binds `b`
                segments = segments[:-1]
            if not segments or segments[-1] in _MODULE_KEYWORDS:
                return
            result.imports.append(
                ImportBinding(segments[-1], join_path(segments), module, path, public)
            )

        elif kind == "use_as_clause":
            origin = prefix + split_path(_compact(node_text(node.child_by_field_name("path"))))
            alias = node_text(node.child_by_field_name("alias"))
            if len(origin) > 1 and origin[-1] == "self":
                origin = origin[:-1]
            if not origin or not alias or alias == "_":
                return
            result.imports.append(ImportBinding(alias, join_path(origin), module, path, public))

        elif kind == "use_list":
            for child in node.named_children:
                self._flatten_use(child, prefix, module, path, public, result)

        elif kind == "scoped_use_list":
            path_node = node.child_by_field_name("path")
            list_node = node.child_by_field_name("list")
            nested = prefix + split_path(_compact(node_text(path_node))) if path_node else prefix
            if list_node is not None:
                self._flatten_use(list_node, nested, module, path, public, result)

        elif kind == "use_wildcard":
            text = _compact(node_text(node))
            origin = prefix + split_path(text[:-1] if text.endswith("*") else text)
            if origin:
                result.globs.append(GlobImport(join_path(origin), module, path, public))

    # ── Types ─────────────────────────────────────────────────────────

    def _field_refs(self, type_node: Node, params: frozenset[str]) -> list[str]:
        return dependencies(self.type_ref(type_node), params, self._extra_builtins)

    def type_ref(self, node: Node) -> TypeRef:
        """Convert a type node into a TypeRef tree."""
        kind = node.type
        text = _compact(node_text(node))

        if text == SELF_TYPE:
            return PathType(SELF_TYPE)
        if kind in ("type_identifier", "primitive_type", "scoped_type_identifier", "identifier"):
            return PathType(text)
        if kind == "generic_type":
            base = _compact(node_text(node.child_by_field_name("type")))
            arguments = node.child_by_field_name("type_arguments")
            args: tuple[TypeRef, ...] = ()
            if arguments is not None:
                args = tuple(
                    self.type_ref(child)
                    for child in arguments.named_children
                    if child.type not in _SKIPPED_NODES
                )
            return GenericType(PathType(base), args)
        if kind == "type_binding":
            # `Iterator<Item = Leaf>`
            inner = node.child_by_field_name("type")
            return self.type_ref(inner) if inner is not None else OtherType(text)
        if kind in ("reference_type", "pointer_type"):
            inner = node.child_by_field_name("type")
            if inner is None:
                return OtherType(text)
            return ReferenceType(self.type_ref(inner), pointer=kind == "pointer_type")
        if kind == "array_type":
            element = node.child_by_field_name("element")
            if element is None:
                return OtherType(text)
            return ArrayType(self.type_ref(element), sized=node.child_by_field_name("length") is not None)
        if kind == "tuple_type":
            return TupleType(
                tuple(
                    self.type_ref(child)
                    for child in node.named_children
                    if child.type not in _SKIPPED_NODES
                )
            )
        if kind == "unit_type":
            return TupleType(())
        return OtherType(text)

    def _type_parameters(self, node: Node) -> frozenset[str]:
        """Names of the generic parameters an item declares."""
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return frozenset()
        names: set[str] = set()
        for child in params_node.named_children:
            if child.type == "type_identifier":
                names.add(node_text(child))
            elif child.type == "constrained_type_parameter":
                left = child.child_by_field_name("left")
                if left is not None and left.type == "type_identifier":
                    names.add(node_text(left))
            elif child.type in ("type_parameter", "optional_type_parameter", "const_parameter"):
                name = child.child_by_field_name("name")
                if name is not None:
                    names.add(node_text(name))
        return frozenset(names)
