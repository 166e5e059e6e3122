"""Tests for tree-sitter parser wrapper."""

import threading

import pytest

from struct_depth.exceptions import ParsingError
from struct_depth.scanning.treesitter_parser import (
    TreeSitterParser,
    first_error_line,
    get_parser,
    node_text,
)


class TestTreeSitterParser:
    """Test parsing Rust sources."""

    def test_can_instantiate(self):
        """Can create TreeSitterParser."""
        parser = TreeSitterParser()
        assert parser.language == "rust"

    def test_parse_returns_source_file(self):
        """parse() returns a tree rooted at source_file."""
        tree = TreeSitterParser().parse(b"struct A { b: u32 }\n")
        assert tree is not None
        assert tree.root_node.type == "source_file"
        assert not tree.root_node.has_error

    def test_parse_invalid_code_has_error(self):
        """Broken code still parses, with error nodes."""
        tree = TreeSitterParser().parse(b"struct A { b: }\n")
        assert tree is not None
        assert tree.root_node.has_error

    def test_parse_empty(self):
        """Empty input gives an empty source file."""
        tree = TreeSitterParser().parse(b"")
        assert tree is not None
        assert tree.root_node.named_child_count == 0

    def test_parse_source(self):
        """parse_source() encodes text and returns the tree."""
        tree = TreeSitterParser().parse_source("struct A;", "lib.rs")
        assert tree.root_node.named_children[0].type == "struct_item"

    def test_parse_source_without_tree(self, monkeypatch):
        """A parser that gives up raises ParsingError."""
        parser = TreeSitterParser()
        monkeypatch.setattr(parser, "parse", lambda code: None)
        with pytest.raises(ParsingError, match="lib.rs"):
            parser.parse_source("struct A;", "lib.rs")


class TestHelpers:
    """Test node helpers."""

    def test_node_text_decodes(self):
        tree = get_parser().parse(b"struct Leaf;")
        struct = tree.root_node.named_children[0]
        assert node_text(struct.child_by_field_name("name")) == "Leaf"

    def test_node_text_none(self):
        assert node_text(None) == ""

    def test_first_error_line_points_at_error(self):
        tree = get_parser().parse(b"struct A;\n\nstruct B { x: }\n")
        assert first_error_line(tree.root_node) == 3

    def test_first_error_line_none_when_clean(self):
        tree = get_parser().parse(b"struct A;\n")
        assert first_error_line(tree.root_node) is None


class TestThreadLocalParser:
    """Test get_parser() per-thread caching."""

    def test_same_thread_reuses_parser(self):
        assert get_parser() is get_parser()

    def test_other_thread_gets_own_parser(self):
        seen = []
        thread = threading.Thread(target=lambda: seen.append(get_parser()))
        thread.start()
        thread.join()
        assert seen[0] is not get_parser()
