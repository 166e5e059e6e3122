"""Tests for DeclarationExtractor."""

import textwrap
from pathlib import PurePosixPath

import pytest

from struct_depth.config import AnalysisConfig
from struct_depth.exceptions import ErrorCode, FileAccessError
from struct_depth.scanning import DeclarationExtractor
from struct_depth.sources import InMemorySourceProvider


def extract(source: str, config: AnalysisConfig = AnalysisConfig(), module=()):
    extractor = DeclarationExtractor(InMemorySourceProvider({}), config)
    return extractor.extract_source(textwrap.dedent(source), module=module, path="lib.rs")


def fields_of(declarations, name):
    for aggregate in declarations.aggregates:
        if aggregate.name == name:
            return aggregate.field_types
    raise KeyError(name)


def bindings(declarations):
    return {b.local_name: b.origin for b in declarations.imports}


class TestAggregateExtraction:
    """Test struct and union field extraction."""

    def test_named_fields_through_wrappers(self):
        result = extract(
            """
            struct A<'a> {
                x: u32,
                b: B,
                v: Vec<C>,
                r: &'a D,
                p: *const E,
                arr: [F; 3],
                s: &'a [G],
                t: (H, u8),
                o: Option<Box<I>>,
            }
            """
        )
        assert fields_of(result, "A") == ("B", "C", "D", "E", "F", "G", "H", "I")

    def test_tuple_struct(self):
        result = extract("struct T(A, pub B, u64);")
        assert fields_of(result, "T") == ("A", "B")

    def test_unit_struct(self):
        result = extract("struct Marker;")
        assert fields_of(result, "Marker") == ()

    def test_leaf_struct(self):
        result = extract("struct Leaf { a: u8, b: String, c: Vec<bool> }")
        assert fields_of(result, "Leaf") == ()

    def test_generic_parameters_are_not_references(self):
        result = extract("struct W<T: Clone, U> { t: T, u: Vec<U>, l: Leaf }")
        assert fields_of(result, "W") == ("Leaf",)

    def test_self_reference(self):
        result = extract("struct Node { next: Option<Box<Self>> }")
        assert fields_of(result, "Node") == ("Self",)

    def test_qualified_references_kept_raw(self):
        result = extract(
            """
            struct Q {
                a: super::Leaf,
                b: crate::m::Mid,
                c: std::collections::HashMap<String, X>,
            }
            """
        )
        assert fields_of(result, "Q") == ("super::Leaf", "crate::m::Mid", "X")

    def test_user_generic_application(self):
        result = extract("struct P { w: Wrapper<Leaf, u8> }")
        assert fields_of(result, "P") == ("Wrapper", "Leaf")

    def test_trait_objects_yield_nothing(self):
        result = extract("struct H { f: Box<dyn Fn(A) -> B> }")
        assert fields_of(result, "H") == ()

    def test_union(self):
        result = extract("union U { a: A, b: u32 }")
        assert result.aggregates[0].kind == "union"
        assert fields_of(result, "U") == ("A",)

    def test_unions_can_be_excluded(self):
        result = extract("union U { a: A }", AnalysisConfig(include_unions=False))
        assert result.aggregates == []

    def test_extra_builtins(self):
        result = extract(
            "struct S { k: Pubkey, l: Leaf }", AnalysisConfig(extra_builtin_types=["Pubkey"])
        )
        assert fields_of(result, "S") == ("Leaf",)

    def test_structs_in_function_bodies_ignored(self):
        result = extract("fn f() { struct Local { a: A } }")
        assert result.aggregates == []

    def test_line_and_path_recorded(self):
        result = extract("\n\nstruct Late;")
        aggregate = result.aggregates[0]
        assert aggregate.path == "lib.rs"
        assert aggregate.line == 3


class TestAliasExtraction:
    """Test type alias targets."""

    def test_plain_alias(self):
        result = extract("type X = Y;")
        assert [(a.name, a.target) for a in result.aliases] == [("X", "Y")]

    def test_wrapper_looked_through(self):
        result = extract("type Handle = Rc<RefCell<Node>>;")
        assert result.aliases[0].target == "Node"

    def test_generic_target_keeps_suffix(self):
        result = extract("type Pair<T> = Wrapper<T>;")
        assert result.aliases[0].target == "Wrapper<T>"

    def test_builtin_alias_skipped(self):
        result = extract("type Id = u32;")
        assert result.aliases == []
        assert result.opaque_aliases == ["Id"]


class TestUseExtraction:
    """Test use-tree flattening."""

    def test_rename(self):
        result = extract("use a::b::Inner as Local;")
        assert bindings(result) == {"Local": "a::b::Inner"}

    def test_simple(self):
        result = extract("use crate::shapes::Circle;")
        assert bindings(result) == {"Circle": "crate::shapes::Circle"}

    def test_group_with_self_and_rename(self):
        result = extract("use crate::shapes::{Circle, Square as Sq, self};")
        assert bindings(result) == {
            "Circle": "crate::shapes::Circle",
            "Sq": "crate::shapes::Square",
            "shapes": "crate::shapes",
        }

    def test_nested_groups(self):
        result = extract("use a::{b::{C, D}, E};")
        assert bindings(result) == {"C": "a::b::C", "D": "a::b::D", "E": "a::E"}

    def test_glob(self):
        result = extract("use super::*;")
        assert [g.origin for g in result.globs] == ["super"]

    def test_glob_inside_group(self):
        result = extract("use crate::{shapes::*, Leaf};")
        assert [g.origin for g in result.globs] == ["crate::shapes"]
        assert bindings(result) == {"Leaf": "crate::Leaf"}

    def test_pub_use_is_public(self):
        result = extract("pub use inner::Thing;\nuse other::Private;")
        visibility = {b.local_name: b.public for b in result.imports}
        assert visibility == {"Thing": True, "Private": False}

    def test_module_keyword_alone_binds_nothing(self):
        result = extract("use super;")
        assert result.imports == []


class TestModules:
    """Test inline and out-of-line module handling."""

    def test_inline_modules_extend_path(self):
        result = extract(
            """
            mod outer {
                pub struct A { b: inner::B }
                mod inner {
                    pub struct B;
                }
            }
            """
        )
        assert [a.name for a in result.aggregates] == ["outer::A", "outer::inner::B"]
        assert result.aggregates[0].module == ("outer",)
        assert result.modules == [("outer",), ("outer", "inner")]

    def test_imports_tagged_with_module(self):
        result = extract("mod m { use super::Leaf; }")
        assert result.imports[0].module == ("m",)

    def test_out_of_line_module_without_provider_is_reported(self):
        result = extract("mod missing;")
        assert [d.code for d in result.diagnostics] == [ErrorCode.SD200]
        assert result.modules == [("missing",)]

    def test_follows_name_rs(self, make_crate):
        provider = make_crate(lib="mod a;", a="pub struct A { b: B }")
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert [a.name for a in result.aggregates] == ["a::A"]
        assert result.files == ["lib.rs", "a.rs"]

    def test_follows_mod_rs(self, make_crate):
        provider = make_crate(
            lib="mod shapes;",
            shapes__mod="mod point;\npub struct Circle;",
            shapes__point="pub struct Point;",
        )
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert sorted(a.name for a in result.aggregates) == ["shapes::Circle", "shapes::point::Point"]

    def test_name_rs_owns_directory(self, make_crate):
        provider = make_crate(lib="mod a;", a="mod b;", a__b="pub struct B;")
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert [a.name for a in result.aggregates] == ["a::b::B"]

    def test_name_rs_preferred_over_mod_rs(self, make_crate):
        provider = make_crate(lib="mod a;", a="pub struct FromFile;", a__mod="pub struct FromDir;")
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert [a.name for a in result.aggregates] == ["a::FromFile"]

    def test_inline_module_resolves_files_below_it(self, make_crate):
        provider = make_crate(lib="mod outer { mod deep; }", outer__deep="pub struct D;")
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert [a.name for a in result.aggregates] == ["outer::deep::D"]

    def test_missing_submodule_skipped(self, make_crate):
        provider = make_crate(lib="mod gone;\npub struct Root;")
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert [a.name for a in result.aggregates] == ["Root"]
        assert [d.code for d in result.diagnostics] == [ErrorCode.SD200]

    def test_submodules_not_followed_when_disabled(self, make_crate):
        provider = make_crate(lib="mod a;", a="pub struct A;")
        extractor = DeclarationExtractor(provider, AnalysisConfig(follow_submodules=False))
        result = extractor.extract_crate(PurePosixPath("lib.rs"))
        assert result.aggregates == []

    def test_visited_files_not_reextracted(self, make_crate):
        provider = make_crate(lib="mod a;", a="pub struct A;")
        visited = {PurePosixPath("a.rs")}
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"), visited)
        assert result.aggregates == []
        assert [d.code for d in result.diagnostics] == [ErrorCode.SD201]


class TestTraitsAndImpls:
    """Test trait and implementation extraction."""

    def test_supertraits(self):
        result = extract("trait AdvancedState: Display + StateManagement { fn f(&self); }")
        assert result.traits[0].supertraits == ("Display", "StateManagement")

    def test_trait_without_bounds(self):
        result = extract("pub trait A {}")
        assert result.traits[0].supertraits == ()

    def test_lifetime_and_sized_bounds_ignored(self):
        result = extract("trait T: 'static + Base + ?Sized {}")
        assert result.traits[0].supertraits == ("Base",)

    def test_trait_impl(self):
        result = extract("impl Display for TestState {}")
        impl = result.impls[0]
        assert (impl.trait_name, impl.type_name) == ("Display", "TestState")

    def test_generic_impl(self):
        result = extract("impl<T> Iterator for Walker<T> {}")
        assert (result.impls[0].trait_name, result.impls[0].type_name) == ("Iterator", "Walker")

    def test_inherent_impl_ignored(self):
        result = extract("impl TestState { fn new() -> Self { todo!() } }")
        assert result.impls == []


class TestFailures:
    """Test read and parse failures."""

    def test_syntax_error_skips_file(self):
        result = extract("struct Good;\nstruct Bad { x: }")
        assert result.aggregates == []
        assert result.files == []
        assert [d.code for d in result.diagnostics] == [ErrorCode.SD102]

    def test_syntax_errors_tolerated_when_configured(self):
        result = extract(
            "struct Good { l: Leaf }\nstruct Bad { x: }",
            AnalysisConfig(skip_files_with_syntax_errors=False),
        )
        assert "Good" in [a.name for a in result.aggregates]

    def test_read_error_reported(self):
        class BrokenProvider(InMemorySourceProvider):
            def read(self, path):
                raise FileAccessError(path, "permission denied")

        provider = BrokenProvider({"lib.rs": "struct A;"})
        result = DeclarationExtractor(provider).extract_crate(PurePosixPath("lib.rs"))
        assert result.aggregates == []
        assert [d.code for d in result.diagnostics] == [ErrorCode.SD100]
        assert "permission denied" in result.diagnostics[0].message


@pytest.mark.parametrize(
    "source",
    [
        "struct A { b: B }",
        "pub(crate) struct A { pub b: B }",
        "#[derive(Debug)]\nstruct A { #[serde(skip)] b: B }",
    ],
)
def test_attributes_and_visibility_do_not_matter(source):
    """Attributes and visibility modifiers never change the extracted fields."""
    assert fields_of(extract(source), "A") == ("B",)
