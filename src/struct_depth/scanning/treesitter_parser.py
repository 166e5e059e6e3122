"""Tree-sitter parser wrapper for Rust sources.

tree-sitter ``Parser`` objects are not safe to share between threads, so
each thread gets its own parser through ``get_parser()``.

Usage:
    parser = get_parser()
    tree = parser.parse(code_bytes)
    if tree is not None and not tree.root_node.has_error:
        ...
"""

from __future__ import annotations

import threading
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

import tree_sitter
import tree_sitter_rust

from ..exceptions import ParsingError

if TYPE_CHECKING:
    Node = tree_sitter.Node
    Tree = tree_sitter.Tree

RUST_LANGUAGE = tree_sitter.Language(tree_sitter_rust.language())

_local = threading.local()


class TreeSitterParser:
    """Wrapper around a tree-sitter parser bound to the Rust grammar."""

    language = "rust"

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(RUST_LANGUAGE)

    def parse(self, code: bytes) -> Tree | None:
        """Parse code and return the syntax tree, or None if parsing aborted."""
        result: Tree | None = self._parser.parse(code)
        return result

    def parse_source(self, text: str, filepath: str = "<memory>") -> Tree:
        """Parse source text.

        Raises:
            ParsingError: If tree-sitter returns no tree
        """
        tree = self.parse(text.encode("utf-8"))
        if tree is None:
            raise ParsingError(PurePath(filepath), "parser returned no tree")
        return tree


def get_parser() -> TreeSitterParser:
    """Return the calling thread's parser, creating it on first use."""
    parser: Any = getattr(_local, "parser", None)
    if parser is None:
        parser = TreeSitterParser()
        _local.parser = parser
    return parser


def node_text(node: Node | None) -> str:
    """Decoded text of a node ('' for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def first_error_line(node: Node) -> int | None:
    """1-indexed line of the first ERROR or MISSING node below ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point[0] + 1
        if current.has_error:
            stack.extend(reversed(current.children))
    return None
